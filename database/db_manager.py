import asyncpg

from database.repositories import RoundRepositoryDB


class DatabaseManager:
    """Repositories sharing one asyncpg pool."""

    def __init__(self, pool: asyncpg.Pool) -> None:
        self.pool = pool
        self.rounds = RoundRepositoryDB(pool)
