"""
Weather Forecast Script
=======================

Fetches the 3-hourly OpenWeatherMap forecast for the configured location,
reduces it to daily summaries, upserts them and purges stale rows.

Usage:
    parksync-fetch-weather
"""

import sys
import time
from datetime import date, datetime, timezone
from typing import Callable, Optional

from ..collector.openweather_client import OpenWeatherClient
from ..collector.park_mappings import DEFAULT_WEATHER_LOCATION, WeatherLocation
from ..database.repositories.sync_status_repository import SyncStatusRepository
from ..database.repositories.weather_repository import WeatherForecastRepository
from ..processor.run_summary import RunState, RunSummary
from ..processor.weather_aggregator import aggregate_daily, parse_weather_samples
from ..utils.config import WEATHER_RETENTION_DAYS, ConfigurationError
from ..utils.logger import log_entity_error, log_sync_complete, log_sync_start, logger
from ..utils.retry import build_retrying, call_with_retry

JOB_NAME = 'weather_forecast'


class WeatherForecastJob:
    """Daily weather summaries for a single location.

    Usage:
        ```python
        job = WeatherForecastJob(OpenWeatherClient(api_key), repo)
        summary = job.run()
        ```
    """

    def __init__(self, client: OpenWeatherClient, repository: WeatherForecastRepository,
                 location: WeatherLocation = DEFAULT_WEATHER_LOCATION, retrying=None,
                 retention_days: int = WEATHER_RETENTION_DAYS,
                 status_repository: Optional[SyncStatusRepository] = None,
                 clock: Callable[[], float] = time.monotonic,
                 today: Optional[Callable[[], date]] = None):
        self.client = client
        self.repository = repository
        self.location = location
        self.retrying = retrying if retrying is not None else build_retrying()
        self.retention_days = retention_days
        self.status_repository = status_repository
        self.clock = clock
        self._today = today or (lambda: datetime.now(timezone.utc).date())

    def run(self) -> RunSummary:
        """
        Fetch, aggregate and store the forecast, then purge stale rows.

        ``summary.results`` holds the stored daily forecasts as dicts and
        ``summary.counts['stale_deleted']`` the purge count.

        Raises:
            ConfigurationError: If no API key is configured
        """
        summary = RunSummary(JOB_NAME, clock=self.clock)
        fetched_at = datetime.now(timezone.utc)
        log_sync_start(JOB_NAME, 1)

        try:
            summary.state = RunState.FETCHING
            payload = call_with_retry(self.retrying, self.client.get_forecast,
                                      self.location.latitude, self.location.longitude)

            summary.state = RunState.PARSING
            days = aggregate_daily(parse_weather_samples(payload), self.location.location_id, fetched_at)

            summary.state = RunState.WRITING
            written = self.repository.upsert_forecasts(days)
            summary.add_records(written, (day.forecast_date for day in days))
            summary.results.extend(_forecast_dict(day) for day in days)
            summary.mark_processed(self.location.location_id)
            logger.info(f"Stored {written} daily forecasts for {self.location.name}")
        except ConfigurationError:
            raise
        except Exception as e:
            log_entity_error(JOB_NAME, self.location.location_id, e)
            summary.add_error(self.location.location_id, e)

        summary.add_count('stale_deleted', self.repository.purge_stale(self._today(), self.retention_days))

        summary.finish()
        log_sync_complete(JOB_NAME, summary.duration_ms, len(summary.processed),
                          summary.records_written, len(summary.errors))
        if self.status_repository is not None:
            self.status_repository.record_run(summary)
        return summary


def _forecast_dict(day) -> dict:
    row = day.to_row()
    row['forecast_date'] = day.forecast_date.isoformat()
    row['forecast_time'] = day.forecast_time.isoformat() if day.forecast_time else None
    return row


def main():
    """Main entry point for CLI."""
    from ..container import Container

    container = Container()
    try:
        summary = container.weather_job().run()
    except ConfigurationError as e:
        logger.error("Weather fetch not configured", extra={'error': str(e)})
        sys.exit(2)

    logger.info("=" * 60)
    logger.info(f"Stored {summary.records_written} daily forecasts, "
                f"purged {summary.counts.get('stale_deleted', 0)} stale rows")
    for message in summary.error_messages:
        logger.error(message)
    logger.info("=" * 60)

    sys.exit(0 if summary.success else 1)


if __name__ == '__main__':
    main()
