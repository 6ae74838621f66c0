"""Clasificación de IntegrityError independiente del motor (PostgreSQL / SQLite)"""
from sqlalchemy.exc import IntegrityError

FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"


def _sqlstate(exc: IntegrityError):
    orig = getattr(exc, "orig", None)
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    code = _sqlstate(exc)
    if code:
        return code == FOREIGN_KEY_VIOLATION
    return "FOREIGN KEY" in str(exc.orig).upper()


def is_unique_violation(exc: IntegrityError) -> bool:
    code = _sqlstate(exc)
    if code:
        return code == UNIQUE_VIOLATION
    return "UNIQUE" in str(exc.orig).upper()
