from __future__ import annotations

import dataclasses
from typing import List, Optional

from .types import DrawResult

FALLBACK_RESULTS = (
    DrawResult(
        date="Wednesday, October 29, 2025",
        numbers=(21, 33, 40, 42, 50),
        star_ball=5,
        all_star_bonus=2,
        winners=35560,
        jackpot="$5,680,000",
        is_live=False,
    ),
    DrawResult(
        date="Monday, October 27, 2025",
        numbers=(12, 21, 27, 35, 39),
        star_ball=2,
        all_star_bonus=4,
        winners=29269,
        jackpot="$5,530,000",
        is_live=False,
    ),
    DrawResult(
        date="Saturday, October 25, 2025",
        numbers=(2, 31, 33, 35, 50),
        star_ball=7,
        all_star_bonus=2,
        winners=48122,
        jackpot="$5,400,000",
        is_live=False,
    ),
)


def fallback_results(debug_info: Optional[str] = None) -> List[DrawResult]:
    """Sample drawings served when neither live nor cached data is available."""
    results = list(FALLBACK_RESULTS)
    if debug_info is not None:
        results[0] = dataclasses.replace(results[0], debug_info=debug_info)
    return results
