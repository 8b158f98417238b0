from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .cache import CacheSnapshot, ResultCache
from .datasource import ResultDataSource
from .diagnostics import Diagnostics
from .fallback import fallback_results
from .types import CacheInfo, DrawResult, HandlerState, TransportError


@dataclass
class ProviderResponse:
    results: List[DrawResult]
    diagnostics: Diagnostics
    cache: CacheInfo
    state: HandlerState
    transitions: List[HandlerState] = field(default_factory=list)

    def to_payload(self, debug: bool = False) -> Any:
        results = [r.to_dict() for r in self.results]
        if not debug:
            return results
        return {
            "results": results,
            "diagnostics": self.diagnostics.to_dict(),
            "cache": self.cache.to_dict(),
        }


class LottoResultProvider:
    """Serve the latest drawings: fresh cache, else live scrape, else fallback.

    Refresh is lazy. A failed scrape never touches the cache, so the next
    request retries the live source. Each response lists the handler states
    it passed through in `transitions`.
    """

    def __init__(
        self,
        datasource: ResultDataSource,
        cache: Optional[ResultCache] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._datasource = datasource
        self._cache = cache or ResultCache()
        self._last_diagnostics: Optional[Diagnostics] = None
        self._logger = logger or logging.getLogger("lottoamerica.scraper")

    @property
    def cache(self) -> ResultCache:
        return self._cache

    @property
    def source_url(self) -> str:
        return self._datasource.source_url

    async def close(self) -> None:
        await self._datasource.close()

    async def get_results(self, debug: bool = False) -> ProviderResponse:
        snapshot = self._cache.get()
        if self._cache.is_fresh(snapshot):
            return self._serve_cached(snapshot)

        transitions = [HandlerState.CACHE_STALE_OR_EMPTY]
        self._logger.info(
            "Cache %s; fetching fresh results from %s",
            "stale" if snapshot else "empty",
            self.source_url,
        )
        try:
            outcome = await self._datasource.fetch_latest()
        except Exception as exc:
            self._logger.warning("Scrape of %s failed: %s", self.source_url, exc)
            diagnostics = Diagnostics(source_url=self.source_url)
            if isinstance(exc, TransportError):
                diagnostics.http_status = exc.status_code
                diagnostics.fail("http_error", exc)
            else:
                diagnostics.fail("scrape_error", exc)
            return self._serve_failure(diagnostics, snapshot, debug, transitions)

        if not outcome.results:
            self._logger.warning("No results parsed from %s", self.source_url)
            return self._serve_failure(outcome.diagnostics, snapshot, debug, transitions)

        self._cache.put(outcome.results)
        outcome.diagnostics.add_step("success", True, f"{len(outcome.results)} results scraped")
        self._last_diagnostics = outcome.diagnostics
        return ProviderResponse(
            results=list(outcome.results),
            diagnostics=outcome.diagnostics,
            cache=CacheInfo(used=False, age_ms=0, last_fetch_time=self._cache.last_fetch_time_ms),
            state=HandlerState.FETCH_SUCCEEDED,
            transitions=transitions + [HandlerState.FETCH_SUCCEEDED],
        )

    def _serve_cached(self, snapshot: CacheSnapshot) -> ProviderResponse:
        self._logger.debug("Using cached lottery results (age=%sms)", snapshot.age_ms)
        base = self._last_diagnostics or Diagnostics(source_url="cache")
        diagnostics = base.chained("cache_used", True, f"age={snapshot.age_ms}ms")
        return ProviderResponse(
            results=list(snapshot.results),
            diagnostics=diagnostics,
            cache=CacheInfo(used=True, age_ms=snapshot.age_ms, last_fetch_time=self._cache.last_fetch_time_ms),
            state=HandlerState.CACHE_FRESH,
            transitions=[HandlerState.CACHE_FRESH],
        )

    def _serve_failure(
        self,
        diagnostics: Diagnostics,
        snapshot: Optional[CacheSnapshot],
        debug: bool,
        transitions: List[HandlerState],
    ) -> ProviderResponse:
        last_fetch_time = self._cache.last_fetch_time_ms
        if snapshot is not None:
            diagnostics.used_fallback = False
            diagnostics.add_step("stale_cache_used", True, f"age={snapshot.age_ms}ms")
            results = list(snapshot.results)
            cache = CacheInfo(used=True, age_ms=snapshot.age_ms, last_fetch_time=last_fetch_time)
        else:
            self._logger.info("Falling back to sample data for %s", self.source_url)
            diagnostics.used_fallback = True
            diagnostics.add_step("fallback_used", True, "No live or cached results available")
            results = fallback_results(diagnostics.to_json() if debug else None)
            cache = CacheInfo(used=False, age_ms=0, last_fetch_time=last_fetch_time)
        self._last_diagnostics = diagnostics
        return ProviderResponse(
            results=results,
            diagnostics=diagnostics,
            cache=cache,
            state=HandlerState.FETCH_FAILED,
            transitions=transitions + [HandlerState.FETCH_FAILED],
        )
