"""
Crowd Calendar Import Script
============================

Imports a year of predicted crowd levels for every configured park from the
Thrill Data crowd calendar.

Features:
- Sequential per-park processing with pacing (1 second between parks)
- Bounded retry of transient failures (network errors, 429)
- One failing park never aborts the others
- Structured JSON logging

Usage:
    # Import the current year
    parksync-import-crowds

    # Import a specific year
    parksync-import-crowds --year 2026
"""

import argparse
import sys
import time
from datetime import datetime, timezone
from typing import Callable, List, Optional

from ..collector.crowd_calendar_parser import DEFAULT_PATTERN, CalendarPattern, CrowdCalendarParser
from ..collector.park_mappings import ParkConfig
from ..collector.thrill_data_client import ThrillDataClient
from ..database.repositories.crowd_prediction_repository import CrowdPredictionRepository
from ..database.repositories.sync_status_repository import SyncStatusRepository
from ..processor.run_summary import RunState, RunSummary
from ..utils.config import CROWD_IMPORT_DELAY_SECONDS, CROWD_IMPORT_YEARS_AHEAD, CROWD_IMPORT_YEARS_BACK
from ..utils.logger import log_entity_error, log_sync_complete, log_sync_start, logger
from ..utils.rate_limiter import FixedDelay, PacingPolicy
from ..utils.retry import build_retrying, call_with_retry

JOB_NAME = 'crowd_calendar_import'


def valid_year_range(current_year: int):
    """Inclusive (min, max) year accepted for an import."""
    return current_year - CROWD_IMPORT_YEARS_BACK, current_year + CROWD_IMPORT_YEARS_AHEAD


def validate_year(year, current_year: int) -> int:
    """
    Validate a requested import year.

    Raises:
        ValueError: If the year is not an integer or outside the accepted range
    """
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValueError("Year must be an integer")
    low, high = valid_year_range(current_year)
    if not low <= year <= high:
        raise ValueError(f"Year must be between {low} and {high}")
    return year


class CrowdCalendarImporter:
    """Crowd calendar importer for a list of parks.

    Usage:
        ```python
        importer = CrowdCalendarImporter(ThrillDataClient(), repo, parks)
        summary = importer.run(2025)
        print(summary.to_dict())
        ```
    """

    def __init__(self, client: ThrillDataClient, repository: CrowdPredictionRepository,
                 parks: List[ParkConfig], pacing: Optional[PacingPolicy] = None,
                 retrying=None, pattern: CalendarPattern = DEFAULT_PATTERN,
                 status_repository: Optional[SyncStatusRepository] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.client = client
        self.repository = repository
        self.parks = parks
        self.pacing = pacing if pacing is not None else FixedDelay(CROWD_IMPORT_DELAY_SECONDS)
        self.retrying = retrying if retrying is not None else build_retrying()
        self.pattern = pattern
        self.status_repository = status_repository
        self.clock = clock

    def run(self, year: int) -> RunSummary:
        """Import ``year`` for every park. Per-park failures are recorded, not raised."""
        summary = RunSummary(JOB_NAME, clock=self.clock)
        synced_at = datetime.now(timezone.utc)
        log_sync_start(JOB_NAME, len(self.parks))
        self.pacing.reset()

        for park in self.parks:
            self.pacing.acquire()
            try:
                self._import_park(park, year, synced_at, summary)
            except Exception as e:
                log_entity_error(JOB_NAME, park.park_id, e)
                summary.add_error(park.park_id, e)

        summary.finish()
        log_sync_complete(JOB_NAME, summary.duration_ms, len(summary.processed),
                          summary.records_written, len(summary.errors))
        if self.status_repository is not None:
            self.status_repository.record_run(summary)
        return summary

    def _import_park(self, park: ParkConfig, year: int, synced_at: datetime, summary: RunSummary):
        logger.info(f"Importing crowd calendar for {park.display_name} ({year})")

        summary.state = RunState.FETCHING
        html = call_with_retry(self.retrying, self.client.get_crowd_calendar, park.thrill_data_id, year)

        summary.state = RunState.PARSING
        parser = CrowdCalendarParser(self.pattern)
        predictions = list(parser.parse(html, year, park.park_id, synced_at=synced_at))

        if not predictions:
            logger.warning("No crowd predictions found", extra={
                "park_id": park.park_id,
                "year": year,
                "skipped_cells": len(parser.skipped)
            })

        summary.state = RunState.WRITING
        written = self.repository.upsert_predictions(predictions)
        summary.add_records(written, (p.prediction_date for p in predictions))
        summary.mark_processed(park.park_id)

        logger.info(f"Imported {written} crowd predictions for {park.park_id}", extra={
            "park_id": park.park_id,
            "records": written,
            "skipped_cells": len(parser.skipped)
        })


def main():
    """Main entry point for CLI."""
    from ..container import Container

    current_year = datetime.now(timezone.utc).year
    parser = argparse.ArgumentParser(
        description='Import Thrill Data crowd calendar predictions'
    )
    parser.add_argument(
        '--year',
        type=int,
        default=current_year,
        help='Calendar year to import (default: current year)'
    )
    args = parser.parse_args()

    try:
        year = validate_year(args.year, current_year)
    except ValueError as e:
        parser.error(str(e))

    container = Container()
    summary = container.crowd_importer().run(year)

    logger.info("=" * 60)
    logger.info(f"Imported {summary.records_written} records for "
                f"{len(summary.processed)}/{len(container.parks)} parks")
    for message in summary.error_messages:
        logger.error(message)
    logger.info("=" * 60)

    sys.exit(0 if summary.success else 1)


if __name__ == '__main__':
    main()
