from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..config import BROWSER_USER_AGENT
from ..diagnostics import Diagnostics
from ..fetcher import fetch_page
from ..parser import ResultParser
from ..types import FetchedPage
from .base import ResultDataSource, ScrapeOutcome


@dataclass(frozen=True)
class HttpResultDataSourceConfig:
    """Where to fetch the results page and how to identify ourselves."""

    url: str
    timeout_seconds: int = 15
    user_agent: str = BROWSER_USER_AGENT


class HttpResultDataSource(ResultDataSource):
    """Fetch a results page (HTML or JSON) over HTTP and parse it."""

    def __init__(
        self,
        config: HttpResultDataSourceConfig,
        parser: Optional[ResultParser] = None,
        fetch: Callable[[str, float, str], FetchedPage] = fetch_page,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config
        self._parser = parser or ResultParser()
        self._fetch = fetch
        self._logger = logger or logging.getLogger("lottoamerica.scraper")

    @property
    def source_url(self) -> str:
        return self._config.url

    async def fetch_latest(self) -> ScrapeOutcome:
        cfg = self._config
        diagnostics = Diagnostics(source_url=cfg.url)
        diagnostics.add_step("start_scrape", True, "Initiated scraping process")

        page = await asyncio.to_thread(self._fetch, cfg.url, cfg.timeout_seconds, cfg.user_agent)
        diagnostics.http_status = page.status_code
        diagnostics.add_step("http_get", page.status_code == 200, f"HTTP {page.status_code}")
        self._logger.debug("Fetched %s (%s bytes), parsing results", cfg.url, len(page.body))

        results = self._parser.parse(page.body, diagnostics)
        self._logger.info("Parsed %s results from %s", len(results), cfg.url)
        return ScrapeOutcome(diagnostics=diagnostics, results=results)
