"""
Custom SQLAlchemy types for cross-database compatibility.

Provides types that work across PostgreSQL and SQLite for testing.
"""

from sqlalchemy import TypeDecorator, JSON
from sqlalchemy.dialects.postgresql import JSONB

from backend.src.services.recurrence import normalize_int_list
from backend.src.utils.logging_config import get_logger


logger = get_logger("db")


class IntListType(TypeDecorator):
    """
    Sorted, de-duplicated list of integers stored as JSON.

    Uses PostgreSQL's native JSONB type when available,
    otherwise falls back to JSON for SQLite.

    Holds the day lists of a recurrence rule. Rows written by older
    versions may hold NULL, a single number or a "1,3" string; these are
    read back with the same rules as API input. Values that cannot be
    read as a day list load as an empty list, so the template simply
    yields no dates.
    """

    impl = JSON
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(JSON())

    def process_bind_param(self, value, dialect):
        if value is None:
            return []
        return sorted({int(v) for v in value})

    def process_result_value(self, value, dialect):
        try:
            return normalize_int_list(value)
        except ValueError as e:
            logger.warning(
                f"Ignoring unreadable day list: {e}",
                extra={"stored_value": repr(value)},
            )
            return []
