"""Scoring differentials and the rolling best-of-last-20 handicap index.

Lower differentials are better. Nothing here validates its input: callers
check slope and rating before asking for a differential, and the ``Round``
model does that for rounds it creates.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

if TYPE_CHECKING:
    from models.round import Round

SLOPE_NEUTRAL = 113
HANDICAP_WINDOW = 20
MAX_COUNTING = 8


def differential(gross: float, rating: float, slope: float) -> float:
    """Normalise one round against course difficulty.

    ``(gross - rating) * 113 / slope``, unrounded. A zero slope raises
    ZeroDivisionError.
    """
    return (gross - rating) * SLOPE_NEUTRAL / slope


def round_half_up(value: float, places: int = 1) -> float:
    """Round the exact binary value of ``value`` half away from zero.

    ``value`` must be finite.
    """
    exact = Decimal(value)
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        # room for every integer digit of the result plus ``places``
        ctx.prec = max(ctx.prec, exact.adjusted() + places + 2)
        return float(exact.quantize(quantum, rounding=ROUND_HALF_UP))


def differentials_to_count(n: int) -> int:
    """How many of the best differentials count when ``n`` are available."""
    if n >= HANDICAP_WINDOW:
        return MAX_COUNTING
    if n >= 8:
        return max(3, n // 2)
    return min(3, n)


def counting_differentials(differentials: Iterable[float]) -> List[float]:
    """The best differentials from the most recent window, lowest first.

    ``differentials`` must be ordered oldest to newest.
    """
    window = sorted(list(differentials)[-HANDICAP_WINDOW:])
    return window[:differentials_to_count(len(window))]


def handicap_index(differentials: Iterable[float]) -> float:
    """Average of the counting differentials, to one decimal place.

    Zero differentials gives 0.0.
    """
    counting = counting_differentials(differentials)
    avg = sum(counting) / max(1, len(counting))
    if not math.isfinite(avg):
        return 0.0
    return round_half_up(avg, 1)


def chronological(rounds: Iterable["Round"]) -> List["Round"]:
    """Rounds ordered oldest first (date, then creation time)."""
    return sorted(rounds, key=_round_sort_key)


def _round_sort_key(round_obj: "Round"):
    created = round_obj.created_at.timestamp() if round_obj.created_at else 0.0
    return (round_obj.date, created)


def round_differentials(rounds: Sequence["Round"]) -> List[float]:
    """Differentials of ``rounds`` oldest first, skipping rounds without one."""
    return [r.differential for r in chronological(rounds) if r.differential is not None]


def handicap_index_for_rounds(rounds: Sequence["Round"]) -> float:
    """Handicap index for stored rounds in any order (the store lists newest first)."""
    return handicap_index(round_differentials(rounds))


def best_differential(rounds: Sequence["Round"]) -> Optional[float]:
    diffs = round_differentials(rounds)
    return min(diffs) if diffs else None
