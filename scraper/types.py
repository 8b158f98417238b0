from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

MAIN_NUMBER_COUNT = 5
MAIN_NUMBER_RANGE = range(1, 53)
STAR_BALL_RANGE = range(1, 11)
JACKPOT_NOT_AVAILABLE = "Not available"


class TransportError(RuntimeError):
    """Raised when the source page could not be fetched."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseItemError(ValueError):
    """Raised when a single candidate record cannot be turned into a result."""


class HandlerState(Enum):
    CACHE_FRESH = "cache_fresh"
    CACHE_STALE_OR_EMPTY = "cache_stale_or_empty"
    FETCH_SUCCEEDED = "fetch_succeeded"
    FETCH_FAILED = "fetch_failed"


@dataclass(frozen=True)
class DrawResult:
    """One Lotto America drawing."""

    date: str
    numbers: Sequence[int]
    star_ball: int
    all_star_bonus: int = 1
    winners: int = 0
    jackpot: str = JACKPOT_NOT_AVAILABLE
    is_live: bool = True
    debug_info: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "date": self.date,
            "numbers": list(self.numbers),
            "starBall": self.star_ball,
            "allStarBonus": self.all_star_bonus,
            "winners": self.winners,
            "jackpot": self.jackpot,
            "isLive": self.is_live,
        }
        if self.debug_info is not None:
            payload["debugInfo"] = self.debug_info
        return payload


def validate_draw(
    date: str,
    numbers: Sequence[int],
    star_ball: Optional[int],
    all_star_bonus: int = 1,
    winners: int = 0,
    jackpot: str = JACKPOT_NOT_AVAILABLE,
) -> DrawResult:
    """Build a live `DrawResult`, raising `ParseItemError` if it is not fully valid."""
    if not date:
        raise ParseItemError("missing draw date")
    if len(numbers) != MAIN_NUMBER_COUNT:
        raise ParseItemError(
            f"expected {MAIN_NUMBER_COUNT} main numbers, found {len(numbers)}"
        )
    for n in numbers:
        if n not in MAIN_NUMBER_RANGE:
            raise ParseItemError(f"main number {n} outside 1-52")
    if star_ball is None:
        raise ParseItemError("missing star ball")
    if star_ball not in STAR_BALL_RANGE:
        raise ParseItemError(f"star ball {star_ball} outside 1-10")
    return DrawResult(
        date=date,
        numbers=tuple(numbers),
        star_ball=star_ball,
        all_star_bonus=max(1, all_star_bonus),
        winners=max(0, winners),
        jackpot=jackpot or JACKPOT_NOT_AVAILABLE,
        is_live=True,
    )


@dataclass(frozen=True)
class CacheInfo:
    used: bool
    age_ms: int
    last_fetch_time: int

    def to_dict(self) -> Dict[str, Any]:
        return {"used": self.used, "ageMs": self.age_ms, "lastFetchTime": self.last_fetch_time}


@dataclass(frozen=True)
class FetchedPage:
    url: str
    body: str
    status_code: int
    content_type: str = ""
