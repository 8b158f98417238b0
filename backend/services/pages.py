from __future__ import annotations

import time
from typing import Callable, Optional


class IndexPage:
    """Rendered home page, rebuilt lazily once it is older than the TTL.

    `regenerate` forces a rebuild; the revalidate endpoint calls it.
    """

    def __init__(
        self,
        render: Callable[[], str],
        ttl_seconds: int = 600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._render = render
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._html: Optional[str] = None
        self._generated_at: Optional[float] = None

    @property
    def generated_at(self) -> Optional[float]:
        return self._generated_at

    def is_stale(self) -> bool:
        if self._html is None or self._generated_at is None:
            return True
        return self._clock() - self._generated_at >= self._ttl_seconds

    def get(self) -> str:
        if self.is_stale():
            return self.regenerate()
        return self._html

    def regenerate(self) -> str:
        html = self._render()
        self._html = html
        self._generated_at = self._clock()
        return html
