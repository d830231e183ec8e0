"""
Unit Tests: Park Sync Job

Test Strategy:
- Fake fetcher replays ThemeParks.wiki documents per park
- Writer is a Mock; rows handed to it are inspected
- freezegun pins "today" for the park snapshot
"""

from datetime import date, datetime, timezone
from unittest.mock import Mock

import pytest
from freezegun import freeze_time

from conftest import FakeFetcher
from parksync.collector.errors import NotFound
from parksync.collector.themeparks_wiki_client import ThemeParksWikiClient
from parksync.database.repositories.live_data_repository import LiveDataRepository
from parksync.database.repositories.schedule_repository import ScheduleRepository
from parksync.scripts.sync_parks import ParkSyncJob, build_sync_dates, months_covering

MARCH_DATES = [date(2025, 3, 14), date(2025, 3, 15)]


def _rows_for(writer, table_name):
    rows = []
    for call in writer.upsert.call_args_list:
        table, table_rows, _ = call.args
        if table.name == table_name:
            rows.extend(table_rows)
    return rows


class TestParkSyncJob:

    @pytest.fixture
    def routes(self, live_payload, schedule_payload):
        # Month routes first: the base schedule URL is a prefix of them
        routes = {
            '/entity/mk-uuid/schedule/2025/03': {'schedule': [
                {
                    'date': '2025-03-15', 'type': 'OPERATING', 'description': None,
                    'openingTime': '2025-03-15T08:00:00-04:00', 'closingTime': '2025-03-15T23:00:00-04:00'
                },
            ]},
            '/entity/mk-uuid/live': live_payload,
            '/entity/mk-uuid/schedule': schedule_payload,
        }
        for uuid in ('ep-uuid', 'hs-uuid', 'ak-uuid'):
            routes[f'/entity/{uuid}/live'] = {'liveData': []}
            routes[f'/entity/{uuid}/schedule'] = {'schedule': [], 'timezone': 'America/New_York'}
        return routes

    def _job(self, routes, writer, parks, no_pacing, fast_retrying, client=None, status_repository=None):
        return ParkSyncJob(
            client or ThemeParksWikiClient(FakeFetcher(routes)),
            LiveDataRepository(writer),
            ScheduleRepository(writer),
            parks,
            pacing=no_pacing,
            retrying=fast_retrying,
            status_repository=status_repository,
        )

    @freeze_time("2025-03-14 15:00:00")
    def test_syncs_every_park(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        summary = self._job(routes, mock_writer, parks, no_pacing, fast_retrying).run(MARCH_DATES)

        assert summary.success is True
        assert len(summary.processed) == 4
        assert summary.counts == {'attractions': 3, 'entertainment': 1, 'schedules': 2, 'events': 1}
        assert [r['park'] for r in summary.results] == [p.park_id for p in parks]
        assert summary.results[0] == {
            'park': 'magic-kingdom', 'success': True,
            'attractionsCount': 3, 'entertainmentCount': 1, 'schedulesCount': 2, 'eventsCount': 1,
        }

    @freeze_time("2025-03-14 15:00:00")
    def test_monthly_schedule_overrides_base(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        self._job(routes, mock_writer, parks[:1], no_pacing, fast_retrying).run(MARCH_DATES)

        schedules = {row['schedule_date']: row for row in _rows_for(mock_writer, 'live_park_schedules')}
        assert schedules[date(2025, 3, 14)]['regular_open'] == '09:00'
        assert schedules[date(2025, 3, 15)]['regular_open'] == '08:00'
        assert schedules[date(2025, 3, 15)]['regular_close'] == '23:00'

    @freeze_time("2025-03-14 15:00:00")
    def test_park_snapshot_uses_today(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        self._job(routes, mock_writer, parks[:1], no_pacing, fast_retrying).run(MARCH_DATES)

        [park_row] = _rows_for(mock_writer, 'live_parks')
        assert park_row['park_id'] == 'magic-kingdom'
        assert park_row['status'] == 'operating'
        assert park_row['regular_open'] == '09:00'
        assert park_row['early_entry_open'] == '08:30'

    @freeze_time("2025-03-14 15:00:00")
    def test_attraction_rows(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        self._job(routes, mock_writer, parks[:1], no_pacing, fast_retrying).run(MARCH_DATES)

        waits = {row['attraction_id']: row['wait_time'] for row in _rows_for(mock_writer, 'live_attractions')}
        assert waits == {'space-mountain': 65, 'carousel': 0, 'tiki-room': None}

    @freeze_time("2025-03-14 15:00:00")
    def test_entertainment_rows(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        self._job(routes, mock_writer, parks[:1], no_pacing, fast_retrying).run(MARCH_DATES)

        [show] = _rows_for(mock_writer, 'live_entertainment')
        assert show['park_id'] == 'magic-kingdom'
        assert show['entertainment_id'] == 'parade'
        assert show['status'] == 'operating'
        assert len(show['show_times']) == 3
        assert show['next_show_time'] == datetime(2025, 3, 14, 16, 0, tzinfo=timezone.utc)

    @freeze_time("2025-03-14 15:00:00")
    def test_one_park_not_found(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        routes['/entity/ep-uuid/live'] = NotFound(404, 'Not Found')

        summary = self._job(routes, mock_writer, parks, no_pacing, fast_retrying).run(MARCH_DATES)

        assert summary.success is True
        assert len(summary.processed) == 3
        assert summary.error_messages == ['epcot: HTTP 404 Not Found']
        failed = [r for r in summary.results if not r['success']]
        assert failed == [{'park': 'epcot', 'success': False, 'error': 'HTTP 404 Not Found'}]

    @freeze_time("2025-03-14 15:00:00")
    def test_missing_month_schedule_is_not_fatal(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        routes = {'/entity/ep-uuid/schedule/2025/03': NotFound(404, 'Not Found'), **routes}

        summary = self._job(routes, mock_writer, parks[1:2], no_pacing, fast_retrying).run(MARCH_DATES)

        assert summary.processed == ['epcot']
        assert summary.errors == []
        assert summary.results == [{
            'park': 'epcot', 'success': True,
            'attractionsCount': 0, 'entertainmentCount': 0, 'schedulesCount': 0, 'eventsCount': 0,
        }]

    @freeze_time("2025-03-14 15:00:00")
    def test_month_schedule_without_list_is_skipped(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        routes['/entity/mk-uuid/schedule/2025/03'] = {'schedule': 'not a list'}

        summary = self._job(routes, mock_writer, parks[:1], no_pacing, fast_retrying).run(MARCH_DATES)

        assert summary.processed == ['magic-kingdom']
        assert summary.errors == []
        schedules = {row['schedule_date']: row for row in _rows_for(mock_writer, 'live_park_schedules')}
        assert schedules[date(2025, 3, 15)]['regular_open'] == '09:00'

    @freeze_time("2025-03-14 15:00:00")
    def test_month_schedule_that_is_not_an_object_is_skipped(self, parks, mock_writer, no_pacing,
                                                              fast_retrying, schedule_payload):
        client = Mock()
        client.get_entity_live.return_value = {'liveData': []}
        client.get_entity_schedule.return_value = schedule_payload
        client.get_entity_schedule_month.return_value = [{'date': '2025-03-15'}]

        summary = self._job({}, mock_writer, parks[:1], no_pacing, fast_retrying, client=client).run(MARCH_DATES)

        assert summary.processed == ['magic-kingdom']
        assert summary.errors == []
        assert summary.counts['schedules'] == 2

    @freeze_time("2025-03-14 15:00:00")
    def test_records_run_status(self, routes, parks, mock_writer, no_pacing, fast_retrying):
        status_repository = Mock()

        summary = self._job(routes, mock_writer, parks, no_pacing, fast_retrying,
                            status_repository=status_repository).run(MARCH_DATES)

        status_repository.record_run.assert_called_once_with(summary)
        assert summary.job == 'park_sync'


class TestBuildSyncDates:

    def test_default_days(self):
        dates = build_sync_dates(today=date(2025, 12, 30))

        assert len(dates) == 7
        assert dates[0] == date(2025, 12, 30)
        assert dates[-1] == date(2026, 1, 5)

    def test_explicit_window(self):
        dates = build_sync_dates(start_date='2025-03-01', end_date='2025-03-03')

        assert dates == [date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3)]

    @pytest.mark.parametrize('kwargs', [
        {'days': 0},
        {'days': 91},
        {'days': '7'},
        {'start_date': '2025-03-05', 'end_date': '2025-03-01'},
        {'start_date': '2025-03-05'},
        {'start_date': 'someday', 'end_date': '2025-03-01'},
        {'start_date': '2025-01-01', 'end_date': '2025-06-01'},
    ])
    def test_invalid_windows(self, kwargs):
        with pytest.raises(ValueError):
            build_sync_dates(today=date(2025, 3, 1), **kwargs)

    def test_months_covering(self):
        dates = build_sync_dates(start_date='2025-12-30', end_date='2026-01-02')

        assert months_covering(dates) == [(2025, 12), (2026, 1)]
