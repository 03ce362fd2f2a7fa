from .handicap import (
    counting_differentials,
    differential,
    differentials_to_count,
    handicap_index,
    handicap_index_for_rounds,
)
from .stats import (
    differentials_by_course,
    handicap_summary,
    handicap_trend,
)
from .visualizations import (
    plot_differentials_by_course,
    plot_handicap_trend,
)

__all__ = [
    "differential",
    "differentials_to_count",
    "counting_differentials",
    "handicap_index",
    "handicap_index_for_rounds",
    "handicap_summary",
    "handicap_trend",
    "differentials_by_course",
    "plot_handicap_trend",
    "plot_differentials_by_course",
]
