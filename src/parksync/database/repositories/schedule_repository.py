"""
Park Sync - Schedule Repository
===============================

Persistence for per-date park hours (live_park_schedules) and special
ticketed events (live_park_events).
"""

from typing import Iterable

from ...models.orm_live import LiveParkEventRow, LiveParkScheduleRow
from ...models.records import ParkEvent, ParkScheduleDay

SCHEDULE_KEY = ('park_id', 'schedule_date')
EVENT_KEY = ('park_id', 'event_date', 'event_type', 'event_name')


class ScheduleRepository:
    """
    Repository for park schedule and event rows.

    Unique keys:
    - live_park_schedules: (park_id, schedule_date)
    - live_park_events: (park_id, event_date, event_type, event_name)
    """

    def __init__(self, writer):
        self.writer = writer

    def upsert_schedule_days(self, days: Iterable[ParkScheduleDay]) -> int:
        rows = [day.to_row() for day in days]
        return self.writer.upsert(LiveParkScheduleRow.__table__, rows, SCHEDULE_KEY)

    def upsert_events(self, events: Iterable[ParkEvent]) -> int:
        rows = [event.to_row() for event in events]
        return self.writer.upsert(LiveParkEventRow.__table__, rows, EVENT_KEY)
