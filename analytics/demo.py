from __future__ import annotations

from pathlib import Path

from analytics.stats import handicap_summary
from database.demo_data import build_demo_rounds

from .visualizations import (
    plot_differentials_by_course,
    plot_handicap_trend,
)


def main() -> None:
    rounds = build_demo_rounds("demo")
    output_dir = Path("analytics/output")
    output_dir.mkdir(parents=True, exist_ok=True)

    fig1, _ = plot_handicap_trend(rounds)
    fig1.savefig(output_dir / "handicap_trend.png", dpi=150)

    fig2, _ = plot_differentials_by_course(rounds)
    fig2.savefig(output_dir / "differentials_by_course.png", dpi=150)

    summary = handicap_summary(rounds)
    print(f"Handicap index: {summary['handicap_index']} "
          f"({summary['rounds_counted']} of {summary['total_rounds']} rounds counted)")
    print(f"Saved charts to: {output_dir.resolve()}")


if __name__ == "__main__":
    main()
