# backend/pr_tracker/services/sequence_service.py
"""
Named, gap-free counters.

``next_value`` is the only entry point: it increments and returns in a single
statement, so concurrent callers on the same series always receive distinct,
consecutive values. There is no read-only accessor.
"""
from __future__ import annotations
import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pr_tracker.core.errors import InvalidInput, StorageUnavailable
from pr_tracker.models import Counter

logger = logging.getLogger(__name__)

_MSSQL_MERGE = text(
    "MERGE Counter WITH (HOLDLOCK) AS t "
    "USING (SELECT :name AS name) AS s ON t.name = s.name "
    "WHEN MATCHED THEN UPDATE SET t.value = t.value + 1 "
    "WHEN NOT MATCHED THEN INSERT (name, value) VALUES (s.name, 1) "
    "OUTPUT inserted.value;"
)


def _dialect(db: Session) -> str:
    try:
        return db.get_bind().dialect.name
    except SQLAlchemyError:
        logger.exception("no database bound to session")
        raise StorageUnavailable("No database configured.")


def _increment_stmt(dialect: str, series_name: str):
    """INSERT ... ON CONFLICT DO UPDATE ... RETURNING, or MERGE ... OUTPUT on SQL Server."""
    if dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    elif dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "mssql":
        return _MSSQL_MERGE.bindparams(name=series_name)
    else:
        raise StorageUnavailable(f"Atomic counter increment is not supported on dialect '{dialect}'.")

    stmt = insert(Counter).values(name=series_name, value=1)
    stmt = stmt.on_conflict_do_update(
        index_elements=[Counter.name],
        set_={"value": Counter.value + 1},
    )
    return stmt.returning(Counter.value)


def next_value(db: Session, series_name: str) -> int:
    """
    Increment the counter for ``series_name`` (created at 0 on first use) and
    return the new value. Commits immediately; on any storage error the
    transaction is rolled back and StorageUnavailable is raised.
    """
    if not isinstance(series_name, str) or not series_name.strip():
        raise InvalidInput("Series name is required.")

    stmt = _increment_stmt(_dialect(db), series_name)
    try:
        value = db.execute(stmt).scalar_one()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("next_value failed (series=%s)", series_name)
        raise StorageUnavailable(f"Could not advance counter '{series_name}': {type(e).__name__}")

    logger.debug("series %s -> %s", series_name, value)
    return int(value)
