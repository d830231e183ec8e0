"""
Park Sync - Crowd Prediction Repository
=======================================

Persistence and operator statistics for park_crowd_predictions.
Unique key: (park_id, prediction_date)
"""

from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, select

from ...models.orm_crowd import CrowdPredictionRow
from ...models.records import CrowdPrediction
from ...utils.logger import logger
from ..connection import DatabaseConnection

CROWD_PREDICTION_KEY = ('park_id', 'prediction_date')


class CrowdPredictionRepository:
    """Repository for park_crowd_predictions.

    Usage:
        ```python
        repo = CrowdPredictionRepository(UpsertWriter(db), db)
        repo.upsert_predictions(parser.parse(html, 2025, 'epcot'))
        print(repo.get_stats())
        ```
    """

    table = CrowdPredictionRow.__table__

    def __init__(self, writer, db: Optional[DatabaseConnection] = None):
        self.writer = writer
        self.db = db

    def upsert_predictions(self, predictions: Iterable[CrowdPrediction]) -> int:
        """Insert or overwrite predictions. Returns the number of rows written."""
        rows = [prediction.to_row() for prediction in predictions]
        return self.writer.upsert(self.table, rows, CROWD_PREDICTION_KEY)

    def get_stats(self) -> Dict[str, Any]:
        """
        Summarize stored predictions for operators.

        Returns:
            Dict with totalRecords, dateRange, averageCrowdLevel, lastSync and
            parkCounts. A store-less deployment reports zeros.
        """
        if self.db is None or not self.db.is_configured:
            return {
                'totalRecords': 0,
                'dateRange': None,
                'averageCrowdLevel': None,
                'lastSync': None,
                'parkCounts': {},
                'simulated': True,
            }

        t = CrowdPredictionRow
        with self.db.get_session() as session:
            total, first, last, average, last_sync = session.execute(
                select(
                    func.count(t.id),
                    func.min(t.prediction_date),
                    func.max(t.prediction_date),
                    func.avg(t.crowd_level),
                    func.max(t.synced_at),
                )
            ).one()

            park_rows: List = session.execute(
                select(t.park_id, func.count(t.id)).group_by(t.park_id).order_by(t.park_id)
            ).all()

        stats = {
            'totalRecords': int(total or 0),
            'dateRange': {'start': str(first), 'end': str(last)} if first is not None else None,
            'averageCrowdLevel': round(float(average), 1) if average is not None else None,
            'lastSync': last_sync.isoformat() if hasattr(last_sync, 'isoformat') else last_sync,
            'parkCounts': {park_id: count for park_id, count in park_rows},
        }
        logger.debug("Computed crowd prediction stats", extra={"total_records": stats['totalRecords']})
        return stats
