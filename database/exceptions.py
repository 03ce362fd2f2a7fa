class DatabaseError(Exception):
    """Base for all database errors."""


class IntegrityError(DatabaseError):
    """Check constraint or not-null violation."""
