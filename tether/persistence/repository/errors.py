"""Helpers for translating storage errors."""

from sqlalchemy.exc import IntegrityError


def violates(error: IntegrityError, constraint: str) -> bool:
    """Check whether an integrity error was raised by a named constraint.

    PostgreSQL names the violated constraint in the error message, e.g.
    ``duplicate key value violates unique constraint "uq_accounts_email"``.
    """
    return constraint in str(error.orig)
