"""
Park Sync - Sync Status Repository
==================================

Per-job run bookkeeping in live_sync_status (one row per service_name).
Run counters accumulate in the store, so concurrent runs never lose a count.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from ...models.orm_live import LiveSyncStatusRow
from ...processor.run_summary import RunSummary
from ...utils.logger import logger
from ..connection import DatabaseConnection
from ..upsert import WriteError

SYNC_STATUS_KEY = ('service_name',)
SYNC_COUNTERS = ('total_syncs', 'successful_syncs', 'failed_syncs')
MAX_ERROR_LENGTH = 1000


def _isoformat(value):
    return value.isoformat() if hasattr(value, 'isoformat') else value


class SyncStatusRepository:
    """Repository for live_sync_status.

    Usage:
        ```python
        repo = SyncStatusRepository(UpsertWriter(db), db)
        repo.record_run(summary)
        print(repo.get_all())
        ```
    """

    table = LiveSyncStatusRow.__table__

    def __init__(self, writer, db: Optional[DatabaseConnection] = None):
        self.writer = writer
        self.db = db

    def record_run(self, summary: RunSummary, at: Optional[datetime] = None) -> bool:
        """
        Count one finished run against ``summary.job``.

        A successful run stamps last_success_at; last_error holds the run's
        per-entity errors, or NULL when there were none. A failure to record
        is logged and reported as False; it never fails the run itself.
        """
        at = at or datetime.now(timezone.utc)
        errors = '; '.join(summary.error_messages)
        row = {
            'service_name': summary.job,
            'last_sync_at': at,
            'total_syncs': 1,
            'successful_syncs': 1 if summary.success else 0,
            'failed_syncs': 0 if summary.success else 1,
            'last_error': errors[:MAX_ERROR_LENGTH] or None,
        }
        if summary.success:
            row['last_success_at'] = at

        try:
            self.writer.upsert(self.table, [row], SYNC_STATUS_KEY, SYNC_COUNTERS)
        except WriteError as e:
            logger.warning("Could not record sync status", extra={
                "service_name": summary.job,
                "error": str(e)
            })
            return False
        return True

    def get_all(self) -> List[Dict[str, Any]]:
        """Every job's bookkeeping row, ordered by service name. Empty without a store."""
        if self.db is None or not self.db.is_configured:
            return []

        with self.db.get_session() as session:
            rows = session.execute(
                select(LiveSyncStatusRow).order_by(LiveSyncStatusRow.service_name)
            ).scalars().all()

        return [
            {
                'serviceName': row.service_name,
                'lastSyncAt': _isoformat(row.last_sync_at),
                'lastSuccessAt': _isoformat(row.last_success_at),
                'totalSyncs': row.total_syncs,
                'successfulSyncs': row.successful_syncs,
                'failedSyncs': row.failed_syncs,
                'lastError': row.last_error,
            }
            for row in rows
        ]
