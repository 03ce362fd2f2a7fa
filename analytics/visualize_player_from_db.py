from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import List

from analytics.handicap import chronological
from analytics.stats import handicap_summary
from analytics.visualizations import (
    plot_differentials_by_course,
    plot_handicap_trend,
)
from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from models.round import Round


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate handicap charts for a player from PostgreSQL data."
    )
    parser.add_argument("--user-id", required=True, help="Owner id the rounds are stored under")
    parser.add_argument(
        "--outdir",
        default="analytics/output",
        help="Directory where chart PNGs are written",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Max rounds to load for the player (newest first)",
    )
    parser.add_argument(
        "--dsn",
        default=None,
        help="Optional PostgreSQL DSN. If omitted, uses connection defaults.",
    )
    return parser.parse_args()


async def _load_rounds(user_id: str, dsn: str | None, limit: int | None) -> List[Round]:
    pool = DatabasePool()
    await pool.initialize(dsn=dsn)
    db = DatabaseManager(pool.pool)
    try:
        rounds = await db.rounds.get_rounds_for_user(user_id, limit=limit)
        if not rounds:
            raise RuntimeError(f"No rounds found for user: {user_id}")
        return chronological(rounds)
    finally:
        await pool.close()


async def main_async() -> None:
    args = _parse_args()
    rounds = await _load_rounds(args.user_id, args.dsn, args.limit)

    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    written: list[Path] = []

    fig, _ = plot_handicap_trend(rounds)
    trend_path = outdir / "handicap_trend.png"
    fig.savefig(trend_path, dpi=150)
    written.append(trend_path)

    fig, _ = plot_differentials_by_course(rounds)
    course_path = outdir / "differentials_by_course.png"
    fig.savefig(course_path, dpi=150)
    written.append(course_path)

    summary = handicap_summary(rounds)
    print(f"Handicap index for {args.user_id}: {summary['handicap_index']}")
    print(f"Generated {len(written)} chart(s):")
    for path in written:
        print(path.resolve())


def main() -> None:
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
