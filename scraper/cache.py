from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .types import DrawResult


@dataclass(frozen=True)
class CacheSnapshot:
    results: Sequence[DrawResult]
    fetched_at: float
    age_ms: int


class ResultCache:
    """Single-slot, process-local cache of the last successful scrape."""

    def __init__(self, ttl_seconds: int = 3600, clock: Callable[[], float] = time.time) -> None:
        self._ttl_ms = ttl_seconds * 1000
        self._clock = clock
        self._results: Sequence[DrawResult] = ()
        self._fetched_at: Optional[float] = None

    @property
    def last_fetch_time_ms(self) -> int:
        if self._fetched_at is None:
            return 0
        return int(self._fetched_at * 1000)

    def get(self) -> Optional[CacheSnapshot]:
        if self._fetched_at is None or not self._results:
            return None
        age_ms = int((self._clock() - self._fetched_at) * 1000)
        return CacheSnapshot(results=self._results, fetched_at=self._fetched_at, age_ms=age_ms)

    def is_fresh(self, snapshot: Optional[CacheSnapshot]) -> bool:
        return snapshot is not None and snapshot.age_ms < self._ttl_ms

    def put(self, results: Sequence[DrawResult]) -> None:
        if not results:
            raise ValueError("refusing to cache an empty result set")
        self._results = tuple(results)
        self._fetched_at = self._clock()
