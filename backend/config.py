from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


@dataclass(frozen=True)
class FlaskSettings:
    secret_key: str = "lottoamerica-dev-secret"
    debug: bool = False


@dataclass(frozen=True)
class AppSettings:
    flask: FlaskSettings
    revalidate_secret: Optional[str]
    page_ttl_seconds: int = 600


@lru_cache(maxsize=1)
def load_settings(dotenv_path: Optional[str] = None) -> AppSettings:
    if dotenv_path:
        load_dotenv(dotenv_path)
    else:
        load_dotenv()

    flask_settings = FlaskSettings(
        secret_key=os.getenv("FLASK_SECRET_KEY", "lottoamerica-dev-secret"),
        debug=os.getenv("FLASK_DEBUG", "0") == "1",
    )

    page_ttl = os.getenv("PAGE_TTL_SECONDS")

    return AppSettings(
        flask=flask_settings,
        revalidate_secret=os.getenv("REVALIDATE_SECRET") or None,
        page_ttl_seconds=int(page_ttl) if page_ttl else 600,
    )
