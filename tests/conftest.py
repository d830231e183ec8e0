"""
Park Sync - pytest Configuration and Fixtures

Provides shared test fixtures for:
- Park configuration and sample upstream payloads
- Fake fetchers that replay canned responses
- In-memory SQLite store with the full schema
"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from parksync.collector.errors import NotFound
from parksync.collector.park_mappings import ParkConfig, WeatherLocation
from parksync.collector.source_fetcher import FetchResult
from parksync.database.connection import DatabaseConnection
from parksync.database.upsert import UpsertWriter
from parksync.models import Base
from parksync.utils.rate_limiter import NoPacing
from parksync.utils.retry import build_retrying

FIXTURES_DIR = Path(__file__).parent / 'fixtures'


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def parks():
    """Four parks with distinct upstream identifiers."""
    return [
        ParkConfig('magic-kingdom', 'mk-uuid', 'magic-kingdom', 'Magic Kingdom'),
        ParkConfig('epcot', 'ep-uuid', 'epcot', 'EPCOT'),
        ParkConfig('hollywood-studios', 'hs-uuid', 'hollywood-studios', "Disney's Hollywood Studios"),
        ParkConfig('animal-kingdom', 'ak-uuid', 'animal-kingdom', "Disney's Animal Kingdom"),
    ]


@pytest.fixture
def weather_location():
    return WeatherLocation('walt-disney-world', 'Walt Disney World', 28.3852, -81.5639)


@pytest.fixture
def no_pacing():
    return NoPacing()


@pytest.fixture
def fast_retrying():
    """Retry policy with no waiting between attempts."""
    return build_retrying(max_attempts=3, backoff_multiplier=0)


# ============================================================================
# Upstream Payload Fixtures
# ============================================================================

@pytest.fixture
def calendar_html():
    return (FIXTURES_DIR / 'crowd_calendar_sample.html').read_text(encoding='utf-8')


def calendar_fragment(wait, month_day, value=None):
    """Build one calendar cell as served by the crowd calendar."""
    value = wait if value is None else value
    return f"<div title='Predicted wait time of {wait} minutes on {month_day}'>{value}</div>"


@pytest.fixture
def live_payload():
    """Live feed for Magic Kingdom (park entry plus attractions and a show)."""
    return {
        'id': 'mk-uuid',
        'name': 'Magic Kingdom Park',
        'entityType': 'PARK',
        'timezone': 'America/New_York',
        'liveData': [
            {'id': 'mk-uuid', 'name': 'Magic Kingdom Park', 'entityType': 'PARK', 'status': 'OPERATING'},
            {
                'id': 'space-mountain', 'name': 'Space Mountain', 'entityType': 'ATTRACTION',
                'status': 'OPERATING', 'queue': {'STANDBY': {'waitTime': 65}}
            },
            {
                'id': 'carousel', 'name': "Prince Charming Regal Carrousel", 'entityType': 'ATTRACTION',
                'status': 'OPERATING', 'queue': {'STANDBY': {'waitTime': 0}}
            },
            {
                'id': 'tiki-room', 'name': "Walt Disney's Enchanted Tiki Room", 'entityType': 'ATTRACTION',
                'status': 'CLOSED', 'queue': {}
            },
            {
                'id': 'parade', 'name': 'Festival of Fantasy Parade', 'entityType': 'SHOW',
                'status': 'OPERATING',
                'showtimes': [
                    {'type': 'Performance Time', 'startTime': '2025-03-14T10:00:00-04:00'},
                    {'type': 'Performance Time', 'startTime': '2025-03-14T12:00:00-04:00'},
                    {'type': 'Performance Time', 'startTime': '2025-03-14T15:00:00-04:00'},
                ]
            },
        ]
    }


@pytest.fixture
def schedule_payload():
    """Schedule document for 2025-03-14 and 2025-03-15 (EDT, UTC-4)."""
    return {
        'id': 'mk-uuid',
        'name': 'Magic Kingdom Park',
        'timezone': 'America/New_York',
        'schedule': [
            {
                'date': '2025-03-14', 'type': 'OPERATING', 'description': None,
                'openingTime': '2025-03-14T09:00:00-04:00', 'closingTime': '2025-03-14T22:00:00-04:00'
            },
            {
                'date': '2025-03-14', 'type': 'TICKETED_EVENT', 'description': 'Early Entry',
                'openingTime': '2025-03-14T08:30:00-04:00', 'closingTime': '2025-03-14T09:00:00-04:00'
            },
            {
                'date': '2025-03-14', 'type': 'TICKETED_EVENT', 'description': 'Extended Evening Hours',
                'openingTime': '2025-03-14T22:00:00-04:00', 'closingTime': '2025-03-15T00:00:00-04:00'
            },
            {
                'date': '2025-03-15', 'type': 'OPERATING', 'description': None,
                'openingTime': '2025-03-15T13:00:00Z', 'closingTime': '2025-03-16T01:00:00Z'
            },
            {
                'date': '2025-03-15', 'type': 'TICKETED_EVENT', 'description': "Disney After Hours",
                'openingTime': '2025-03-15T22:00:00-04:00', 'closingTime': '2025-03-16T01:00:00-04:00'
            },
        ]
    }


def weather_sample(dt, temp, condition='Clear', description='clear sky', **overrides):
    """One 3-hourly forecast sample in feed shape."""
    sample = {
        'dt': dt,
        'main': {'temp': temp, 'feels_like': temp, 'humidity': 70},
        'weather': [{'main': condition, 'description': description}],
        'wind': {'speed': 5.0, 'deg': 90},
        'visibility': 10000,
        'pop': 0.0,
    }
    sample.update(overrides)
    return sample


# ============================================================================
# Fake Fetcher
# ============================================================================

class FakeFetcher:
    """
    Replays canned responses keyed by URL substring.

    A value that is an Exception instance is raised instead of returned.
    Unmatched URLs raise NotFound.
    """

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def _match(self, url):
        for fragment, response in self.routes.items():
            if fragment in url:
                return response
        return NotFound(404, 'Not Found', url)

    def fetch(self, url, params=None):
        self.calls.append(url)
        response = self._match(url)
        if isinstance(response, Exception):
            raise response
        return FetchResult(body=response, status_code=200, url=url)

    def fetch_json(self, url, params=None):
        self.calls.append(url)
        response = self._match(url)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self):
        pass


@pytest.fixture
def fake_fetcher():
    return FakeFetcher()


@pytest.fixture
def mock_writer():
    """Writer double that reports every row as written."""
    writer = Mock()
    writer.simulated = False
    writer.upsert.side_effect = lambda table, rows, key_columns, counter_columns=(): len(rows)
    writer.delete_older_than.return_value = 0
    return writer


# ============================================================================
# Store Fixtures
# ============================================================================

@pytest.fixture
def sqlite_db():
    """In-memory SQLite store with every sync table created."""
    db = DatabaseConnection('sqlite://', password='')
    Base.metadata.create_all(db.get_engine())
    yield db
    db.close()


@pytest.fixture
def upsert_writer(sqlite_db):
    return UpsertWriter(sqlite_db)
