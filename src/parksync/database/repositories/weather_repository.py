"""
Weather Repository
==================

Persistence for weather_forecasts.

Features:
- Idempotent upserts keyed on (location_id, forecast_date)
- Non-fatal housekeeping of stale forecasts
"""

from datetime import date, timedelta
from typing import Iterable

from ...models.orm_weather import WeatherForecastRow
from ...models.records import WeatherForecastDay
from ...utils.config import WEATHER_RETENTION_DAYS
from ...utils.logger import logger
from ..upsert import WriteError

WEATHER_FORECAST_KEY = ('location_id', 'forecast_date')


class WeatherForecastRepository:
    """Repository for weather_forecasts table.

    Usage:
        ```python
        repo = WeatherForecastRepository(UpsertWriter(db))
        repo.upsert_forecasts(aggregate_daily(samples, 'walt-disney-world'))
        repo.purge_stale(date.today())
        ```
    """

    table = WeatherForecastRow.__table__

    def __init__(self, writer):
        self.writer = writer

    def upsert_forecasts(self, days: Iterable[WeatherForecastDay]) -> int:
        rows = [day.to_row() for day in days]
        return self.writer.upsert(self.table, rows, WEATHER_FORECAST_KEY)

    def purge_stale(self, today: date, retention_days: int = WEATHER_RETENTION_DAYS) -> int:
        """
        Delete forecasts dated before ``today - retention_days``.

        Failures are logged and reported as 0 deleted rows.
        """
        cutoff = today - timedelta(days=retention_days)
        try:
            deleted = self.writer.delete_older_than(self.table, 'forecast_date', cutoff)
        except WriteError as e:
            logger.warning("Failed to purge stale weather forecasts", extra={
                "cutoff": cutoff.isoformat(),
                "error": str(e)
            })
            return 0

        if deleted:
            logger.info(f"Purged {deleted} stale weather forecasts before {cutoff}")
        return deleted
