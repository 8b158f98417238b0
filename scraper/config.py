from __future__ import annotations

import os
import pathlib
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

SOURCE_PRESETS = {
    "lotteryusa": "https://www.lotteryusa.com/lotto-america/",
    "lottoamerica": "https://www.lottoamerica.com/numbers/",
}
DEFAULT_SOURCE = "lotteryusa"


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


@dataclass(frozen=True)
class SourceSettings:
    name: str = DEFAULT_SOURCE
    url: str = SOURCE_PRESETS[DEFAULT_SOURCE]
    timeout_seconds: int = 15
    user_agent: str = BROWSER_USER_AGENT


@dataclass(frozen=True)
class ScraperSettings:
    source: SourceSettings = SourceSettings()
    cache_ttl_seconds: int = 3600
    max_results: int = 10


def resolve_source(name: Optional[str], url_override: Optional[str]) -> tuple[str, str]:
    """Pick the source URL: an explicit override wins over a named preset."""
    preset = (name or DEFAULT_SOURCE).strip().lower()
    if url_override:
        return (preset if preset in SOURCE_PRESETS else "custom"), url_override
    if preset not in SOURCE_PRESETS:
        raise RuntimeError(
            f"Unknown LOTTO_SOURCE {name!r}; expected one of {sorted(SOURCE_PRESETS)} "
            "or set LOTTO_SOURCE_URL"
        )
    return preset, SOURCE_PRESETS[preset]


def load_from_environment() -> ScraperSettings:
    name, url = resolve_source(os.getenv("LOTTO_SOURCE"), os.getenv("LOTTO_SOURCE_URL"))

    source = SourceSettings(
        name=name,
        url=url,
        timeout_seconds=_int_from_env(os.getenv("LOTTO_TIMEOUT_SECONDS"), 15),
        user_agent=os.getenv("LOTTO_USER_AGENT") or BROWSER_USER_AGENT,
    )

    return ScraperSettings(
        source=source,
        cache_ttl_seconds=_int_from_env(os.getenv("LOTTO_CACHE_TTL_SECONDS"), 3600),
        max_results=_int_from_env(os.getenv("LOTTO_MAX_RESULTS"), 10),
    )


@lru_cache(maxsize=1)
def load_config(dotenv_path: Optional[str] = None) -> ScraperSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        default_path = pathlib.Path(".env")
        if default_path.exists():
            load_dotenv(default_path)
    return load_from_environment()
