"""Load a player's rounds from JSON into the database.
    python3 data/load_rounds.py data/rounds.json <user_id>

The JSON file is a list of objects with date, course, rating, slope, gross
and optionally ocr_raw / image_url. Differentials are computed on load.
"""

import asyncio
import json
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from models import Round
from database.connection import DatabasePool
from database.db_manager import DatabaseManager


async def load_rounds(rounds_path: str, user_id: str, dsn: str = None):
    with open(rounds_path) as f:
        rounds_data = json.load(f)

    print(f"Loaded {len(rounds_data)} rounds from JSON")

    pool = DatabasePool()
    await pool.initialize(dsn=dsn)
    await pool.apply_schema()
    db = DatabaseManager(pool.pool)

    try:
        # Skip duplicates by date + course + gross
        existing_rounds = await db.rounds.get_rounds_for_user(user_id)
        existing_keys = {(r.date.isoformat(), r.course, r.gross) for r in existing_rounds}

        created = 0
        skipped = 0
        for r_data in rounds_data:
            try:
                round_ = Round(user_id=user_id, **r_data)
            except ValidationError as e:
                print(f"  SKIP: {r_data.get('date', '?')} {r_data.get('course', '?')}: {e.errors()[0]['msg']}")
                skipped += 1
                continue

            key = (round_.date.isoformat(), round_.course, round_.gross)
            if key in existing_keys:
                print(f"  EXISTS: {round_.course} {round_.date} - skipping")
                skipped += 1
                continue

            await db.rounds.add_round(round_, user_id)
            existing_keys.add(key)
            created += 1
            print(f"  R{created}: {round_.course} {round_.date} {round_.gross} ({round_.display_differential()})")

        print(f"\nDone: {created} rounds created, {skipped} skipped")

    finally:
        await pool.close()


def main():
    if len(sys.argv) < 3:
        print("Usage: python data/load_rounds.py <rounds.json> <user_id>")
        sys.exit(1)

    dsn = os.environ.get("DATABASE_URL")
    asyncio.run(load_rounds(sys.argv[1], sys.argv[2], dsn))


if __name__ == "__main__":
    main()
