"""
Integration Tests: Schema Migration

Applies the alembic revisions in order to an empty SQLite database and
checks the result against the ORM models.
"""

import importlib.util
from datetime import date
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect

from parksync.database.connection import DatabaseConnection
from parksync.database.upsert import UpsertWriter
from parksync.models import Base, CrowdPredictionRow, LiveEntertainmentRow

VERSIONS_DIR = (
    Path(__file__).parent.parent.parent / 'src' / 'parksync' / 'database' / 'migrations' / 'versions'
)


def _load_revision(filename):
    spec = importlib.util.spec_from_file_location(filename[:-3], VERSIONS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


REVISION_FILES = (
    '001_create_sync_tables.py',
    '002_add_entertainment_and_sync_status.py',
)


@pytest.fixture
def revision():
    return _load_revision(REVISION_FILES[0])


@pytest.fixture
def revisions():
    return [_load_revision(filename) for filename in REVISION_FILES]


@pytest.fixture
def migrated_db(revisions):
    db = DatabaseConnection('sqlite://', password='')
    with db.get_connection() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            for revision in revisions:
                revision.upgrade()
    yield db
    db.close()


class TestRevisions:

    def test_revision_metadata(self, revision):
        assert revision.revision == '001_sync_tables'
        assert revision.down_revision is None

    def test_revisions_form_a_chain(self, revisions):
        assert revisions[1].revision == '002_entertainment_status'
        assert revisions[1].down_revision == revisions[0].revision

    def test_creates_every_model_table(self, migrated_db):
        tables = set(inspect(migrated_db.get_engine()).get_table_names())

        assert tables == set(Base.metadata.tables)

    def test_columns_match_models(self, migrated_db):
        inspector = inspect(migrated_db.get_engine())

        for name, table in Base.metadata.tables.items():
            migrated = {column['name'] for column in inspector.get_columns(name)}
            assert migrated == set(table.columns.keys()), name

    def test_unique_constraints_match_models(self, migrated_db):
        inspector = inspect(migrated_db.get_engine())

        assert inspector.get_unique_constraints('park_crowd_predictions')[0]['column_names'] == [
            'park_id', 'prediction_date'
        ]
        assert inspector.get_unique_constraints('live_park_events')[0]['column_names'] == [
            'park_id', 'event_date', 'event_type', 'event_name'
        ]
        assert inspector.get_unique_constraints('weather_forecasts')[0]['column_names'] == [
            'location_id', 'forecast_date'
        ]
        assert inspector.get_unique_constraints('live_entertainment')[0]['column_names'] == [
            'park_id', 'entertainment_id'
        ]

    def test_upsert_against_migrated_schema(self, migrated_db):
        writer = UpsertWriter(migrated_db)
        row = {
            'park_id': 'epcot', 'prediction_date': date(2025, 1, 1), 'wait_time_minutes': 30,
            'crowd_level': 6, 'crowd_level_description': 'Moderate', 'recommendation': 'Plan ahead',
            'data_source': 'thrill_data',
        }

        writer.upsert(CrowdPredictionRow.__table__, [row], ('park_id', 'prediction_date'))
        writer.upsert(CrowdPredictionRow.__table__, [dict(row, crowd_level=8)], ('park_id', 'prediction_date'))

        with migrated_db.get_session() as session:
            [stored] = session.query(CrowdPredictionRow).all()
            assert stored.crowd_level == 8
            assert stored.synced_at is not None

    def test_show_times_round_trip_as_json(self, migrated_db):
        writer = UpsertWriter(migrated_db)
        row = {
            'park_id': 'magic-kingdom', 'entertainment_id': 'parade', 'name': 'Parade',
            'status': 'operating', 'show_times': ['2025-03-14T12:00:00-04:00', '2025-03-14T15:00:00-04:00'],
        }

        writer.upsert(LiveEntertainmentRow.__table__, [row], ('park_id', 'entertainment_id'))

        with migrated_db.get_session() as session:
            [stored] = session.query(LiveEntertainmentRow).all()
            assert stored.show_times == ['2025-03-14T12:00:00-04:00', '2025-03-14T15:00:00-04:00']

    def test_downgrade_drops_tables(self, revisions):
        engine = create_engine('sqlite://')
        with engine.begin() as conn:
            with Operations.context(MigrationContext.configure(conn)):
                for revision in revisions:
                    revision.upgrade()
                for revision in reversed(revisions):
                    revision.downgrade()

            assert inspect(conn).get_table_names() == []
