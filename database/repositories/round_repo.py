"""Insert, list and clear operations for rounds."""

import logging
from typing import List, Optional, Sequence

import asyncpg

from models import Round
from database.converters import ROUND_COLUMNS, round_from_row, round_to_values
from database.exceptions import DatabaseError, IntegrityError

log = logging.getLogger(__name__)

_INSERT_SQL = (
    f"INSERT INTO rounds ({', '.join(ROUND_COLUMNS)}) "
    f"VALUES ({', '.join(f'${i}' for i in range(1, len(ROUND_COLUMNS) + 1))}) "
    "RETURNING *"
)


class RoundRepositoryDB:
    """Async access to a user's rounds. Rounds are insert-only."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    # ================================================================
    # Read
    # ================================================================

    async def get_rounds_for_user(
        self, user_id: str, *, limit: Optional[int] = None
    ) -> List[Round]:
        """Get a user's rounds ordered by date DESC, newest insert first on ties."""
        async with self._pool.acquire() as conn:
            rows = await conn.fetch(
                """SELECT * FROM rounds
                   WHERE user_id = $1
                   ORDER BY round_date DESC, created_at DESC
                   LIMIT $2""",
                user_id, limit,
            )
            return [round_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def add_round(self, round_: Round, user_id: str) -> Round:
        """Insert one round and return it as stored."""
        if round_.differential is None:
            raise ValueError("Round has no differential; it was not validated")
        try:
            async with self._pool.acquire() as conn:
                row = await conn.fetchrow(_INSERT_SQL, *round_to_values(round_, user_id))
        except (asyncpg.CheckViolationError, asyncpg.NotNullViolationError) as e:
            raise IntegrityError(str(e)) from e
        except asyncpg.PostgresError as e:
            raise DatabaseError(str(e)) from e
        log.info("Stored round %s for user %s", row["id"], user_id)
        return round_from_row(row)

    async def add_rounds(self, rounds: Sequence[Round], user_id: str) -> List[Round]:
        """Insert several rounds in one transaction; all or nothing."""
        stored: List[Round] = []
        try:
            async with self._pool.acquire() as conn:
                async with conn.transaction():
                    for round_ in rounds:
                        row = await conn.fetchrow(_INSERT_SQL, *round_to_values(round_, user_id))
                        stored.append(round_from_row(row))
        except (asyncpg.CheckViolationError, asyncpg.NotNullViolationError) as e:
            raise IntegrityError(str(e)) from e
        except asyncpg.PostgresError as e:
            raise DatabaseError(str(e)) from e
        return stored

    # ================================================================
    # Delete
    # ================================================================

    async def clear_rounds_for_user(self, user_id: str) -> int:
        """Delete every round owned by ``user_id``. Returns how many went."""
        async with self._pool.acquire() as conn:
            result = await conn.execute("DELETE FROM rounds WHERE user_id = $1", user_id)
        deleted = int(result.split()[-1]) if result else 0
        log.info("Cleared %d round(s) for user %s", deleted, user_id)
        return deleted
