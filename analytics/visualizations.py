from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Sequence

from .stats import differentials_by_course, handicap_trend

if TYPE_CHECKING:
    from models.round import Round


def _load_plt():
    try:
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "matplotlib is required for visualizations. Install it with: pip install matplotlib"
        ) from exc
    return plt


def _default_labels(rows: Sequence[Dict[str, Any]]) -> List[str]:
    labels: List[str] = []
    for row in rows:
        if row.get("date") is not None:
            labels.append(row["date"].isoformat())
        else:
            labels.append(f"R{row['round_index']}")
    return labels


def _apply_sparse_xticks(ax, labels: Sequence[str], max_labels: int = 12) -> None:
    """
    Keep x-axis readable when there are many rounds.

    Shows at most `max_labels` ticks while preserving order.
    """
    count = len(labels)
    if count <= max_labels:
        ax.set_xticks(range(count))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        return

    step = max(1, count // max_labels)
    tick_positions = list(range(0, count, step))
    if tick_positions[-1] != count - 1:
        tick_positions.append(count - 1)

    tick_labels = [labels[i] for i in tick_positions]
    ax.set_xticks(tick_positions)
    ax.set_xticklabels(tick_labels, rotation=45, ha="right")


def plot_handicap_trend(rounds: Iterable[Round], labels: Optional[Sequence[str]] = None):
    """
    Combined chart, oldest round first:
    - bars: differential of each round
    - line: handicap index after that round
    """
    plt = _load_plt()
    rows = handicap_trend(rounds)
    x_labels = list(labels) if labels is not None else _default_labels(rows)
    x = list(range(len(rows)))
    diffs = [row["differential"] or 0 for row in rows]
    index_values = [row["handicap_index"] for row in rows]

    fig, ax = plt.subplots(figsize=(11, 5))
    ax.bar(x, diffs, alpha=0.6, label="Differential")
    ax.plot(x, index_values, color="black", marker="o", linewidth=1.5, label="Handicap Index")
    ax.set_title("Handicap Trend")
    ax.set_xlabel("Round")
    ax.set_ylabel("Strokes")
    _apply_sparse_xticks(ax, x_labels)
    ax.grid(axis="y", alpha=0.2)
    ax.legend(loc="upper left")
    fig.tight_layout()
    return fig, ax


def plot_differentials_by_course(rounds: Iterable[Round]):
    """Horizontal bar chart: average differential per course, best at the top."""
    plt = _load_plt()
    rows = differentials_by_course(rounds)
    names = [f"{row['course']} ({row['rounds']})" for row in rows]
    values = [row["average_differential"] for row in rows]

    fig, ax = plt.subplots(figsize=(9, max(3, 0.5 * len(rows) + 1)))
    y = list(range(len(rows)))
    ax.barh(y, values)
    ax.set_yticks(y)
    ax.set_yticklabels(names)
    ax.invert_yaxis()
    ax.set_title("Average Differential By Course")
    ax.set_xlabel("Average Differential")
    ax.grid(axis="x", alpha=0.2)
    fig.tight_layout()
    return fig, ax
