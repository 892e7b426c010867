# Overview: Transaction boundaries, row locks and retry for write operations.

from __future__ import annotations

import time

from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db


def lock_for_update(query):
    """
    Apply row-level locking for critical operations and refresh the rows.

    NOTE: SQLite ignores SELECT ... FOR UPDATE; there the whole write is
    serialized by begin_write_transaction() instead.
    """
    return query.with_for_update().populate_existing()


def begin_write_transaction() -> None:
    """
    Take the database write lock up front on SQLite.

    Without this, two SQLite connections can both read a row and then
    race to write it. BEGIN IMMEDIATE makes the second writer wait.
    """
    if db.engine.dialect.name == "sqlite":
        db.session.execute(text("BEGIN IMMEDIATE"))


def run_with_retry(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (deadlocks, locks) and StaleDataError
    (optimistic locking conflicts).
    """
    last_exc = None
    for attempt in range(attempts):
        try:
            return func()
        except (OperationalError, StaleDataError) as exc:
            db.session.rollback()
            last_exc = exc
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
    if last_exc:
        raise last_exc


def run_in_transaction(func, *, attempts: int = 3, backoff_base: float = 0.1):
    """
    Run ``func`` as one serialized write transaction.

    Commits when ``func`` returns; rolls back on any exception so partial
    writes (e.g. stock already decremented for earlier order lines) never
    persist.
    """
    def _op():
        begin_write_transaction()
        try:
            result = func()
            db.session.commit()
            return result
        except Exception:
            db.session.rollback()
            raise

    return run_with_retry(_op, attempts=attempts, backoff_base=backoff_base)
