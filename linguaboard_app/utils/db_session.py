"""Utility helpers for working with the SQLAlchemy session.

SQLite places a write lock on the database for the duration of a transaction,
which can surface as ``database is locked`` when two workers award points at
roughly the same time.  Once a flush or commit has failed the session must be
rolled back, so :func:`commit_with_retry` re-runs the whole unit of work
(not just the commit) with exponential backoff.
"""

from __future__ import annotations

import time
from typing import Callable, Tuple, Type, TypeVar

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.session import Session

LOCKED_MESSAGES = {"database is locked", "database is busy"}

T = TypeVar("T")


def is_lock_error(error: Exception) -> bool:
    """Return ``True`` if the error was caused by a SQLite lock."""

    if not isinstance(error, OperationalError):
        return False
    message = str(error).lower()
    return any(token in message for token in LOCKED_MESSAGES)


def commit_with_retry(
    session: Session,
    work: Callable[[], T],
    retries: int = 5,
    initial_delay: float = 0.1,
    retry_on: Tuple[Type[Exception], ...] = (),
) -> T:
    """Run ``work`` and commit, re-running both when the failure is retriable.

    Args:
        session: The SQLAlchemy session the unit of work writes through.
        work: Callable performing the reads and writes; its result is returned.
        retries: Maximum number of attempts before the error is re-raised.
        initial_delay: The delay (in seconds) before the first retry.  The
            delay is doubled after every attempt.
        retry_on: Extra exception types that trigger a retry (for example
            ``IntegrityError`` when a unique constraint detects a lost race).

    Raises:
        Exception: The last error, once retries are exhausted or when the
            error is neither a SQLite lock nor one of ``retry_on``.
    """

    delay = initial_delay
    attempt = 0
    while True:
        attempt += 1
        try:
            result = work()
            session.commit()
            return result
        except Exception as exc:
            session.rollback()
            retriable = is_lock_error(exc) or (bool(retry_on) and isinstance(exc, retry_on))
            if not retriable or attempt >= retries:
                raise

        time.sleep(delay)
        delay *= 2
