"""Recognize constraint violations across supported dialects.

Drivers report a unique-constraint violation differently: SQLite only through
the message text, PostgreSQL through SQLSTATE ``23505``. Everything else
raised as an ``IntegrityError`` (NOT NULL, CHECK, ...) is not a uniqueness
conflict and must not be reported as one.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .dialects import DialectName

if TYPE_CHECKING:
    from sqlalchemy.exc import IntegrityError

PG_UNIQUE_VIOLATION = "23505"  # pragma: no mutate
SQLITE_UNIQUE_KEYWORDS = ("unique constraint failed",)  # pragma: no mutate


def is_unique_violation(error: IntegrityError, dialect: DialectName) -> bool:
    """Return True if ``error`` was caused by a unique constraint.

    Args:
        error: The SQLAlchemy IntegrityError raised by the driver.
        dialect: The dialect of the connection that raised it.
    """
    orig = error.orig
    if dialect is DialectName.POSTGRES:
        # psycopg 3 exposes .sqlstate, psycopg2 .pgcode
        code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
        return code == PG_UNIQUE_VIOLATION

    msg = str(orig if orig is not None else error).lower()
    return any(kw in msg for kw in SQLITE_UNIQUE_KEYWORDS)
