from database.connection import DatabasePool, db
from database.db_manager import DatabaseManager
from database.repositories import RoundRepositoryDB
from database.exceptions import DatabaseError, IntegrityError

__all__ = [
    "DatabasePool",
    "db",
    "DatabaseManager",
    "RoundRepositoryDB",
    "DatabaseError",
    "IntegrityError",
]
