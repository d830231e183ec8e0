"""
Park Sync - Live Data Parser
Turns ThemeParks.wiki live and schedule documents into normalized records.

Schedule entries look like:

    {"date": "2025-03-14", "type": "OPERATING",
     "openingTime": "2025-03-14T09:00:00-04:00",
     "closingTime": "2025-03-14T23:00:00-04:00",
     "description": null}

TICKETED_EVENT entries whose description mentions "early" are early entry,
"extended" are extended evening hours, anything else is a special event.
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional

import pytz
from dateutil.parser import isoparse

from ..models.records import (
    LiveAttractionSnapshot,
    LiveEntertainmentSnapshot,
    LiveParkSnapshot,
    ParkEvent,
    ParkScheduleDay,
)
from ..utils.logger import logger
from .errors import ParseError
from .park_mappings import ParkConfig
from .status_calculator import (
    ParkStatus,
    attraction_status,
    entertainment_status,
    map_operating_status,
    park_status,
    validate_wait_time,
)

SCHEDULE_TYPE_OPERATING = 'OPERATING'
SCHEDULE_TYPE_TICKETED_EVENT = 'TICKETED_EVENT'
SPECIAL_EVENT_TYPE = 'SPECIAL_TICKETED_EVENT'


def _live_entries(payload: Any) -> List[Dict]:
    if not isinstance(payload, dict):
        raise ParseError("Live data document must be a JSON object")
    entries = payload.get('liveData', [])
    if not isinstance(entries, list):
        raise ParseError("Live data 'liveData' must be a list")
    return entries


def format_local_time(iso_string: Optional[str], timezone: str) -> Optional[str]:
    """
    Convert an ISO-8601 timestamp into "HH:MM" in the park's timezone.

    Naive timestamps are taken to already be park-local. Unparseable or
    missing values return None.
    """
    if not iso_string:
        return None
    try:
        moment = isoparse(iso_string)
    except (ValueError, TypeError):
        logger.warning(f"Unparseable schedule time '{iso_string}'")
        return None

    tz = pytz.timezone(timezone)
    if moment.tzinfo is None:
        moment = tz.localize(moment)
    return moment.astimezone(tz).strftime('%H:%M')


def _description(entry: Dict) -> str:
    return (entry.get('description') or '').lower()


def is_early_entry(entry: Dict) -> bool:
    return entry.get('type') == SCHEDULE_TYPE_TICKETED_EVENT and 'early' in _description(entry)


def is_extended_evening(entry: Dict) -> bool:
    return entry.get('type') == SCHEDULE_TYPE_TICKETED_EVENT and 'extended' in _description(entry)


def is_special_event(entry: Dict) -> bool:
    return (
        entry.get('type') == SCHEDULE_TYPE_TICKETED_EVENT
        and bool(entry.get('description'))
        and not is_early_entry(entry)
        and not is_extended_evening(entry)
    )


def merge_schedules(*schedules: Iterable[Dict]) -> List[Dict]:
    """
    Merge schedule entry lists, later lists overriding earlier ones.

    Entries are deduplicated by (date, type, description) and returned
    sorted by date.
    """
    merged: Dict[str, Dict] = {}
    for schedule in schedules:
        for entry in schedule or []:
            key = f"{entry.get('date')}_{entry.get('type')}_{entry.get('description') or 'none'}"
            merged[key] = entry
    return sorted(merged.values(), key=lambda e: e.get('date') or '')


def _entries_for_date(schedule: Iterable[Dict], day: date) -> List[Dict]:
    iso = day.isoformat()
    return [entry for entry in schedule if entry.get('date') == iso]


def _first(entries: Iterable[Dict], predicate) -> Optional[Dict]:
    for entry in entries:
        if predicate(entry):
            return entry
    return None


def _day_hours(entries: List[Dict], timezone: str) -> Dict[str, Optional[str]]:
    operating = _first(entries, lambda e: e.get('type') == SCHEDULE_TYPE_OPERATING)
    early = _first(entries, is_early_entry)
    extended = _first(entries, is_extended_evening)

    def _time(entry, field):
        return format_local_time(entry.get(field), timezone) if entry else None

    return {
        'regular_open': _time(operating, 'openingTime'),
        'regular_close': _time(operating, 'closingTime'),
        'early_entry_open': _time(early, 'openingTime'),
        'early_entry_close': _time(early, 'closingTime'),
        'extended_evening_open': _time(extended, 'openingTime'),
        'extended_evening_close': _time(extended, 'closingTime'),
    }


def parse_live_attractions(payload: Any, park_id: str,
                           fetched_at: Optional[datetime] = None) -> Iterator[LiveAttractionSnapshot]:
    """
    Yield one LiveAttractionSnapshot per ATTRACTION entry in a live feed.

    A missing standby wait time yields ``wait_time=None``; a reported 0 is kept.

    Raises:
        ParseError: If the document is not an object or liveData is not a list
    """
    for item in _live_entries(payload):
        if not isinstance(item, dict) or item.get('entityType') != 'ATTRACTION':
            continue

        wait_time = None
        queue = item.get('queue') or {}
        standby = queue.get('STANDBY') if isinstance(queue, dict) else None
        if isinstance(standby, dict):
            wait_time = validate_wait_time(standby.get('waitTime'))

        yield LiveAttractionSnapshot(
            park_id=park_id,
            attraction_id=item.get('id', ''),
            name=item.get('name', ''),
            status=attraction_status(item.get('status')).value,
            wait_time=wait_time,
            last_updated=fetched_at,
        )


def _show_start(iso_string: Any, tz) -> Optional[datetime]:
    if not isinstance(iso_string, str) or not iso_string:
        return None
    try:
        moment = isoparse(iso_string)
    except (ValueError, TypeError):
        logger.warning(f"Unparseable show time '{iso_string}'")
        return None
    if moment.tzinfo is None:
        moment = tz.localize(moment)
    return moment


def parse_live_entertainment(payload: Any, park_id: str,
                             fetched_at: Optional[datetime] = None,
                             timezone: Optional[str] = None) -> Iterator[LiveEntertainmentSnapshot]:
    """
    Yield one LiveEntertainmentSnapshot per SHOW entry in a live feed.

    Show times are the ``startTime`` of each showtime entry, kept as sent.
    ``next_show_time`` is the earliest start strictly after ``fetched_at``
    (default: now). Naive start times are read in the park's timezone.

    Raises:
        ParseError: If the document is not an object or liveData is not a list
    """
    entries = _live_entries(payload)
    tz = pytz.timezone(timezone or payload.get('timezone') or 'UTC')
    now = fetched_at or datetime.now(pytz.utc)

    for item in entries:
        if not isinstance(item, dict) or item.get('entityType') != 'SHOW':
            continue

        show_times = []
        upcoming = []
        showtimes = item.get('showtimes')
        for showtime in showtimes if isinstance(showtimes, list) else []:
            if not isinstance(showtime, dict):
                continue
            start = _show_start(showtime.get('startTime'), tz)
            if start is None:
                continue
            show_times.append(showtime['startTime'])
            if start > now:
                upcoming.append(start)

        yield LiveEntertainmentSnapshot(
            park_id=park_id,
            entertainment_id=item.get('id', ''),
            name=item.get('name', ''),
            status=entertainment_status(item.get('status')).value,
            show_times=show_times,
            next_show_time=min(upcoming) if upcoming else None,
            last_updated=fetched_at,
        )


def _park_live_status(payload: Any, park: ParkConfig) -> Optional[str]:
    for item in _live_entries(payload):
        if isinstance(item, dict) and item.get('id') == park.themeparks_wiki_id:
            return item.get('status')
    return None


def parse_park_snapshot(payload: Any, park: ParkConfig, schedule: List[Dict],
                        today: date, fetched_at: Optional[datetime] = None,
                        timezone: Optional[str] = None) -> LiveParkSnapshot:
    """
    Build the park-level snapshot for ``today``.

    Status comes from the park's own entry in the live feed when present;
    otherwise a park with OPERATING hours today is operating and one
    without is unknown. Hours are None when the schedule has no entry.
    """
    timezone = timezone or (payload.get('timezone') if isinstance(payload, dict) else None) or park.timezone
    entries = _entries_for_date(schedule, today)
    hours = _day_hours(entries, timezone)

    raw_status = _park_live_status(payload, park)
    if raw_status is not None:
        status = park_status(map_operating_status(raw_status))
    elif hours['regular_open']:
        status = ParkStatus.OPERATING
    else:
        status = ParkStatus.UNKNOWN

    name = payload.get('name') if isinstance(payload, dict) else None

    return LiveParkSnapshot(
        park_id=park.park_id,
        external_id=park.themeparks_wiki_id,
        name=name or park.display_name,
        status=status.value,
        timezone=timezone,
        last_updated=fetched_at,
        **hours,
    )


def parse_schedule_days(schedule: List[Dict], park: ParkConfig, dates: Iterable[date],
                        synced_at: Optional[datetime] = None,
                        timezone: Optional[str] = None) -> Iterator[ParkScheduleDay]:
    """
    Yield one ParkScheduleDay per requested date that has schedule entries.

    Dates without data are skipped (logged at INFO).
    """
    timezone = timezone or park.timezone
    for day in dates:
        entries = _entries_for_date(schedule, day)
        if not entries:
            logger.info(f"No schedule data for {park.park_id} on {day.isoformat()}")
            continue

        yield ParkScheduleDay(
            park_id=park.park_id,
            schedule_date=day,
            synced_at=synced_at,
            **_day_hours(entries, timezone),
        )


def parse_special_events(schedule: List[Dict], park: ParkConfig, dates: Iterable[date],
                         synced_at: Optional[datetime] = None,
                         timezone: Optional[str] = None) -> Iterator[ParkEvent]:
    """Yield special ticketed events (not early entry or extended evening) on the requested dates."""
    timezone = timezone or park.timezone
    for day in dates:
        for entry in _entries_for_date(schedule, day):
            if not is_special_event(entry):
                continue
            yield ParkEvent(
                park_id=park.park_id,
                event_date=day,
                event_name=entry['description'],
                event_type=SPECIAL_EVENT_TYPE,
                event_open=format_local_time(entry.get('openingTime'), timezone),
                event_close=format_local_time(entry.get('closingTime'), timezone),
                description=entry['description'],
                synced_at=synced_at,
            )
