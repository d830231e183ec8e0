"""
Park Sync - Live Data Repository
Persistence for live_parks, live_attractions and live_entertainment.
"""

from typing import Iterable

from ...models.orm_live import LiveAttractionRow, LiveEntertainmentRow, LiveParkRow
from ...models.records import LiveAttractionSnapshot, LiveEntertainmentSnapshot, LiveParkSnapshot

LIVE_PARK_KEY = ('park_id',)
LIVE_ATTRACTION_KEY = ('park_id', 'attraction_id')
LIVE_ENTERTAINMENT_KEY = ('park_id', 'entertainment_id')


class LiveDataRepository:
    """Upserts current park state, attraction wait times and show times."""

    def __init__(self, writer):
        self.writer = writer

    def upsert_park(self, snapshot: LiveParkSnapshot) -> int:
        return self.writer.upsert(LiveParkRow.__table__, [snapshot.to_row()], LIVE_PARK_KEY)

    def upsert_attractions(self, snapshots: Iterable[LiveAttractionSnapshot]) -> int:
        rows = [snapshot.to_row() for snapshot in snapshots]
        return self.writer.upsert(LiveAttractionRow.__table__, rows, LIVE_ATTRACTION_KEY)

    def upsert_entertainment(self, snapshots: Iterable[LiveEntertainmentSnapshot]) -> int:
        rows = [snapshot.to_row() for snapshot in snapshots]
        return self.writer.upsert(LiveEntertainmentRow.__table__, rows, LIVE_ENTERTAINMENT_KEY)
