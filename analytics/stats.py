from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from .handicap import (
    chronological,
    counting_differentials,
    handicap_index,
    round_differentials,
    round_half_up,
)

if TYPE_CHECKING:
    from models.round import Round


def handicap_summary(rounds: Iterable[Round]) -> Dict[str, Any]:
    """Compute the handicap index and the numbers behind it for a player."""
    ordered = chronological(rounds)
    diffs = round_differentials(ordered)
    counting = counting_differentials(diffs)
    gross_scores = [r.gross for r in ordered]

    scoring_average: Optional[float] = None
    if gross_scores:
        scoring_average = round_half_up(sum(gross_scores) / len(gross_scores), 1)

    return {
        "handicap_index": handicap_index(diffs),
        "total_rounds": len(ordered),
        "rounds_counted": len(counting),
        "counting_differentials": [round_half_up(d, 1) for d in counting],
        "scoring_average": scoring_average,
        "best_gross": min(gross_scores) if gross_scores else None,
        "best_differential": round_half_up(min(diffs), 1) if diffs else None,
    }


def handicap_trend(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """Running handicap index after each round, oldest round first."""
    results: List[Dict[str, Any]] = []
    seen: List[float] = []
    for index, round_obj in enumerate(chronological(rounds), start=1):
        if round_obj.differential is not None:
            seen.append(round_obj.differential)
        results.append(
            {
                "round_index": index,
                "round_id": round_obj.id,
                "date": round_obj.date,
                "course": round_obj.course,
                "gross": round_obj.gross,
                "differential": round_obj.display_differential(),
                "handicap_index": handicap_index(seen),
            }
        )
    return results


def differentials_by_course(rounds: Iterable[Round]) -> List[Dict[str, Any]]:
    """
    Average differential per course.

    Output rows, best average first:
    - course: course name as entered
    - average_differential: mean differential, one decimal
    - rounds: number of rounds at the course
    """
    by_course: Dict[str, List[float]] = {}
    for round_obj in rounds:
        if round_obj.differential is None:
            continue
        by_course.setdefault(round_obj.course, []).append(round_obj.differential)

    results: List[Dict[str, Any]] = []
    for course, values in by_course.items():
        results.append(
            {
                "course": course,
                "average_differential": round_half_up(sum(values) / len(values), 1),
                "rounds": len(values),
            }
        )
    results.sort(key=lambda row: (row["average_differential"], row["course"]))
    return results
