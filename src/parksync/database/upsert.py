"""
Park Sync - Upsert Writer
Idempotent batch persistence keyed on natural keys.

Every batch is one dialect-native upsert statement inside one transaction:
PostgreSQL and SQLite use ON CONFLICT (...) DO UPDATE, MySQL uses
ON DUPLICATE KEY UPDATE. Rows are never deleted and re-inserted.

PostgreSQL cannot update one row twice in a single statement, so each
batch is collapsed on its natural key first; the last occurrence wins.
"""

from datetime import date
from typing import Any, Dict, List, Sequence

from sqlalchemy import Table, delete
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError

from ..utils.logger import logger
from .connection import DatabaseConnection


class WriteError(Exception):
    """A batch could not be persisted. Nothing from the batch was committed."""

    def __init__(self, table: str, detail: str):
        super().__init__(f"Failed to write {table}: {detail}")
        self.table = table
        self.detail = detail


def unique_on_key(rows: List[Dict[str, Any]], key_columns: Sequence[str]) -> List[Dict[str, Any]]:
    """Collapse rows sharing a natural key; the last occurrence wins, first-seen order is kept."""
    unique: Dict[tuple, Dict[str, Any]] = {}
    for row in rows:
        unique[tuple(row[name] for name in key_columns)] = row
    return list(unique.values())


def _build_upsert(dialect: str, table: Table, rows: List[Dict[str, Any]],
                  key_columns: Sequence[str], counter_columns: Sequence[str] = ()):
    update_columns = [name for name in rows[0] if name not in key_columns]

    def _update_value(name, incoming):
        # Counters accumulate onto the stored value instead of replacing it
        if name in counter_columns:
            return table.c[name] + incoming[name]
        return incoming[name]

    if dialect == 'mysql' or dialect == 'mariadb':
        stmt = mysql_insert(table).values(rows)
        return stmt.on_duplicate_key_update(
            {name: _update_value(name, stmt.inserted) for name in update_columns}
        )

    if dialect == 'postgresql':
        stmt = pg_insert(table).values(rows)
    elif dialect == 'sqlite':
        stmt = sqlite_insert(table).values(rows)
    else:
        raise WriteError(table.name, f"Unsupported dialect for upsert: {dialect}")

    if not update_columns:
        return stmt.on_conflict_do_nothing(index_elements=list(key_columns))
    return stmt.on_conflict_do_update(
        index_elements=list(key_columns),
        set_={name: _update_value(name, stmt.excluded) for name in update_columns},
    )


class UpsertWriter:
    """
    Writes row batches with insert-or-update semantics.

    Usage:
        ```python
        writer = UpsertWriter(db)
        writer.upsert(CrowdPredictionRow.__table__, rows, ('park_id', 'prediction_date'))
        ```
    """

    simulated = False

    def __init__(self, db: DatabaseConnection):
        self.db = db

    def upsert(self, table: Table, rows: List[Dict[str, Any]], key_columns: Sequence[str],
               counter_columns: Sequence[str] = ()) -> int:
        """
        Insert or overwrite ``rows`` keyed on ``key_columns``.

        Rows repeating a key within the batch collapse to the last one.
        ``counter_columns`` are added to the stored value on conflict rather
        than overwriting it.

        Returns:
            Number of distinct rows written

        Raises:
            WriteError: If the statement fails; the batch is rolled back
        """
        if not rows:
            return 0

        unique_rows = unique_on_key(rows, key_columns)
        if len(unique_rows) < len(rows):
            logger.warning("Collapsed duplicate keys in batch", extra={
                "table": table.name,
                "submitted": len(rows),
                "distinct": len(unique_rows)
            })

        try:
            with self.db.get_connection() as conn:
                stmt = _build_upsert(conn.dialect.name, table, unique_rows, key_columns, counter_columns)
                conn.execute(stmt)
        except SQLAlchemyError as e:
            raise WriteError(table.name, str(e)) from e

        logger.debug(f"Upserted {len(unique_rows)} rows into {table.name}")
        return len(unique_rows)

    def delete_older_than(self, table: Table, column: str, cutoff: date) -> int:
        """
        Delete rows whose ``column`` is strictly before ``cutoff``.

        Raises:
            WriteError: If the delete fails
        """
        try:
            with self.db.get_connection() as conn:
                result = conn.execute(delete(table).where(table.c[column] < cutoff))
                deleted = result.rowcount or 0
        except SQLAlchemyError as e:
            raise WriteError(table.name, str(e)) from e

        logger.debug(f"Deleted {deleted} rows from {table.name} older than {cutoff}")
        return deleted


class SimulatedWriter:
    """Same interface as UpsertWriter; logs instead of writing (no store configured)."""

    simulated = True

    def upsert(self, table: Table, rows: List[Dict[str, Any]], key_columns: Sequence[str],
               counter_columns: Sequence[str] = ()) -> int:
        unique_rows = unique_on_key(rows, key_columns)
        if unique_rows:
            logger.info("Simulated upsert", extra={
                "table": table.name,
                "row_count": len(unique_rows),
                "key_columns": list(key_columns)
            })
        return len(unique_rows)

    def delete_older_than(self, table: Table, column: str, cutoff: date) -> int:
        logger.info("Simulated delete", extra={
            "table": table.name,
            "column": column,
            "cutoff": cutoff.isoformat()
        })
        return 0
