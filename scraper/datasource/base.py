from __future__ import annotations

import abc
from dataclasses import dataclass, field
from typing import List

from ..diagnostics import Diagnostics
from ..types import DrawResult


@dataclass
class ScrapeOutcome:
    """Results of one scrape attempt together with how they were obtained."""

    diagnostics: Diagnostics
    results: List[DrawResult] = field(default_factory=list)


class ResultDataSource(abc.ABC):
    """Abstract result provider."""

    @property
    @abc.abstractmethod
    def source_url(self) -> str:
        """Where results are read from; reported in diagnostics."""

    @abc.abstractmethod
    async def fetch_latest(self) -> ScrapeOutcome:
        """Fetch and parse the newest drawings.

        Implementations raise `TransportError` when the source cannot be
        reached. An outcome with no results means every parse strategy came
        up empty.
        """

    async def close(self) -> None:
        """Optional hook for connectors that require cleanup."""
        return None
