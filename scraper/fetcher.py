from __future__ import annotations

import requests

from .config import BROWSER_USER_AGENT
from .types import FetchedPage, TransportError


def fetch_page(url: str, timeout_seconds: float = 15, user_agent: str = BROWSER_USER_AGENT) -> FetchedPage:
    """Issue a single GET against the results source. No retries."""
    try:
        resp = requests.get(url, timeout=timeout_seconds, headers={"User-Agent": user_agent})
    except requests.RequestException as exc:
        raise TransportError(f"GET {url} failed: {exc}") from exc

    if resp.status_code >= 400:
        raise TransportError(f"GET {url} returned HTTP {resp.status_code}", status_code=resp.status_code)

    return FetchedPage(
        url=url,
        body=resp.text,
        status_code=resp.status_code,
        content_type=resp.headers.get("Content-Type", ""),
    )
