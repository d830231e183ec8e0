"""
Park Sync Script
================

Syncs live wait times, show times, park status, per-date operating hours
and special ticketed events from ThemeParks.wiki for every configured park.

Usage:
    # Next 7 days (default)
    parksync-sync-parks

    # Next 30 days
    parksync-sync-parks --days 30

    # Explicit window
    parksync-sync-parks --start-date 2025-12-20 --end-date 2026-01-03

    # Today only
    parksync-sync-parks --today-only
"""

import argparse
import sys
import time
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

import pytz
from dateutil.parser import isoparse

from ..collector.errors import FetchError, ParseError
from ..collector.live_data_parser import (
    merge_schedules,
    parse_live_attractions,
    parse_live_entertainment,
    parse_park_snapshot,
    parse_schedule_days,
    parse_special_events,
)
from ..collector.park_mappings import ParkConfig
from ..collector.themeparks_wiki_client import ThemeParksWikiClient
from ..database.repositories.live_data_repository import LiveDataRepository
from ..database.repositories.schedule_repository import ScheduleRepository
from ..database.repositories.sync_status_repository import SyncStatusRepository
from ..processor.run_summary import RunState, RunSummary
from ..utils.config import PARK_SYNC_DEFAULT_DAYS, PARK_SYNC_DELAY_SECONDS, PARK_SYNC_MAX_DAYS
from ..utils.logger import log_entity_error, log_sync_complete, log_sync_start, logger
from ..utils.rate_limiter import FixedDelay, PacingPolicy
from ..utils.retry import build_retrying, call_with_retry

JOB_NAME = 'park_sync'


def _to_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return isoparse(str(value)).date()
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid date '{value}'") from e


def build_sync_dates(days: Optional[int] = None, start_date=None, end_date=None,
                     today: Optional[date] = None) -> List[date]:
    """
    Resolve the sync window into a list of consecutive dates.

    Either ``start_date`` and ``end_date`` (inclusive, ISO strings or dates)
    or ``days`` counted from ``today`` (default PARK_SYNC_DEFAULT_DAYS).

    Raises:
        ValueError: If the window is empty, reversed, half-specified or
            longer than PARK_SYNC_MAX_DAYS
    """
    today = today or datetime.now(timezone.utc).date()

    if start_date is not None or end_date is not None:
        if start_date is None or end_date is None:
            raise ValueError("start_date and end_date must be provided together")
        start, end = _to_date(start_date), _to_date(end_date)
        if end < start:
            raise ValueError("end_date must not be before start_date")
        span = (end - start).days + 1
        if span > PARK_SYNC_MAX_DAYS:
            raise ValueError(f"Date range must not exceed {PARK_SYNC_MAX_DAYS} days")
        return [start + timedelta(days=i) for i in range(span)]

    if days is None:
        days = PARK_SYNC_DEFAULT_DAYS
    if isinstance(days, bool) or not isinstance(days, int):
        raise ValueError("days must be an integer")
    if not 1 <= days <= PARK_SYNC_MAX_DAYS:
        raise ValueError(f"days must be between 1 and {PARK_SYNC_MAX_DAYS}")
    return [today + timedelta(days=i) for i in range(days)]


def months_covering(dates: List[date]) -> List[Tuple[int, int]]:
    """Distinct (year, month) pairs touched by ``dates``, in order."""
    return sorted({(d.year, d.month) for d in dates})


class ParkSyncJob:
    """Live data and schedule sync for a list of parks.

    Usage:
        ```python
        job = ParkSyncJob(ThemeParksWikiClient(), live_repo, schedule_repo, parks)
        summary = job.run(build_sync_dates(days=7))
        ```
    """

    def __init__(self, client: ThemeParksWikiClient, live_repository: LiveDataRepository,
                 schedule_repository: ScheduleRepository, parks: List[ParkConfig],
                 pacing: Optional[PacingPolicy] = None, retrying=None,
                 status_repository: Optional[SyncStatusRepository] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.client = client
        self.live_repository = live_repository
        self.schedule_repository = schedule_repository
        self.parks = parks
        self.pacing = pacing if pacing is not None else FixedDelay(PARK_SYNC_DELAY_SECONDS)
        self.retrying = retrying if retrying is not None else build_retrying()
        self.clock = clock
        self.status_repository = status_repository

    def run(self, dates: List[date]) -> RunSummary:
        """Sync every park for ``dates``. Per-park failures are recorded, not raised."""
        summary = RunSummary(JOB_NAME, clock=self.clock)
        synced_at = datetime.now(timezone.utc)
        log_sync_start(JOB_NAME, len(self.parks))
        self.pacing.reset()

        for park in self.parks:
            self.pacing.acquire()
            try:
                result = self._sync_park(park, dates, synced_at, summary)
            except Exception as e:
                log_entity_error(JOB_NAME, park.park_id, e)
                summary.add_error(park.park_id, e)
                summary.results.append({'park': park.park_id, 'success': False, 'error': str(e)})
                continue
            summary.results.append(result)

        summary.finish()
        log_sync_complete(JOB_NAME, summary.duration_ms, len(summary.processed),
                          summary.records_written, len(summary.errors))
        if self.status_repository is not None:
            self.status_repository.record_run(summary)
        return summary

    def _fetch_month_schedules(self, park: ParkConfig, dates: List[date]) -> List[List[Dict]]:
        """Monthly schedules for the window. A failing month is logged and skipped."""
        schedules = []
        for year, month in months_covering(dates):
            try:
                doc = call_with_retry(self.retrying, self.client.get_entity_schedule_month,
                                      park.themeparks_wiki_id, year, month)
            except (FetchError, ParseError) as e:
                logger.warning("Monthly schedule unavailable", extra={
                    "park_id": park.park_id,
                    "month": f"{year}-{month:02d}",
                    "error": str(e)
                })
                continue
            entries = doc.get('schedule') if isinstance(doc, dict) else None
            if not isinstance(entries, list):
                logger.warning("Monthly schedule has no schedule list", extra={
                    "park_id": park.park_id,
                    "month": f"{year}-{month:02d}"
                })
                continue
            schedules.append(entries)
        return schedules

    def _sync_park(self, park: ParkConfig, dates: List[date], synced_at: datetime,
                   summary: RunSummary) -> Dict:
        logger.info(f"Syncing {park.display_name}")

        summary.state = RunState.FETCHING
        live = call_with_retry(self.retrying, self.client.get_entity_live, park.themeparks_wiki_id)
        schedule_doc = call_with_retry(self.retrying, self.client.get_entity_schedule,
                                       park.themeparks_wiki_id)
        monthly = self._fetch_month_schedules(park, dates)

        summary.state = RunState.PARSING
        schedule = merge_schedules(schedule_doc.get('schedule') or [], *monthly)
        tz_name = schedule_doc.get('timezone') or live.get('timezone') or park.timezone
        today = datetime.now(pytz.timezone(tz_name)).date()

        snapshot = parse_park_snapshot(live, park, schedule, today, synced_at, timezone=tz_name)
        attractions = list(parse_live_attractions(live, park.park_id, synced_at))
        entertainment = list(parse_live_entertainment(live, park.park_id, synced_at, timezone=tz_name))
        schedule_days = list(parse_schedule_days(schedule, park, dates, synced_at, timezone=tz_name))
        events = list(parse_special_events(schedule, park, dates, synced_at, timezone=tz_name))

        summary.state = RunState.WRITING
        written = self.live_repository.upsert_park(snapshot)
        attractions_count = self.live_repository.upsert_attractions(attractions)
        entertainment_count = self.live_repository.upsert_entertainment(entertainment)
        schedules_count = self.schedule_repository.upsert_schedule_days(schedule_days)
        events_count = self.schedule_repository.upsert_events(events)

        total = written + attractions_count + entertainment_count + schedules_count + events_count
        summary.add_records(total, (day.schedule_date for day in schedule_days))
        summary.add_count('attractions', attractions_count)
        summary.add_count('entertainment', entertainment_count)
        summary.add_count('schedules', schedules_count)
        summary.add_count('events', events_count)
        summary.mark_processed(park.park_id)

        logger.info(f"Synced {park.park_id}", extra={
            "park_id": park.park_id,
            "status": snapshot.status,
            "attractions": attractions_count,
            "entertainment": entertainment_count,
            "schedules": schedules_count,
            "events": events_count
        })
        return {
            'park': park.park_id,
            'success': True,
            'attractionsCount': attractions_count,
            'entertainmentCount': entertainment_count,
            'schedulesCount': schedules_count,
            'eventsCount': events_count,
        }


def main():
    """Main entry point for CLI."""
    from ..container import Container

    parser = argparse.ArgumentParser(
        description='Sync park live data and schedules from ThemeParks.wiki'
    )
    parser.add_argument('--days', type=int, default=None,
                        help=f'Number of days to sync from today (default: {PARK_SYNC_DEFAULT_DAYS})')
    parser.add_argument('--start-date', help='First date to sync (YYYY-MM-DD)')
    parser.add_argument('--end-date', help='Last date to sync (YYYY-MM-DD)')
    parser.add_argument('--today-only', action='store_true', help='Sync today only')
    args = parser.parse_args()

    try:
        if args.today_only:
            dates = build_sync_dates(days=1)
        else:
            dates = build_sync_dates(days=args.days, start_date=args.start_date, end_date=args.end_date)
    except ValueError as e:
        parser.error(str(e))

    container = Container()
    summary = container.park_sync_job().run(dates)

    logger.info("=" * 60)
    logger.info(f"Synced {len(summary.processed)}/{len(container.parks)} parks: "
                f"{summary.counts.get('schedules', 0)} schedules, "
                f"{summary.counts.get('events', 0)} special events, "
                f"{summary.counts.get('attractions', 0)} attractions, "
                f"{summary.counts.get('entertainment', 0)} shows")
    for message in summary.error_messages:
        logger.error(message)
    logger.info("=" * 60)

    sys.exit(0 if summary.success else 1)


if __name__ == '__main__':
    main()
