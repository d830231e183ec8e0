"""Create sync tables

Revision ID: 001_sync_tables
Revises:
Create Date: 2025-10-01

Creates the crowd prediction, live park, schedule, event and weather
forecast tables with unique constraints on their natural keys.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_sync_tables'
down_revision = None
branch_labels = None
depends_on = None


def _time_columns():
    return [
        sa.Column('regular_open', sa.String(5), nullable=True),
        sa.Column('regular_close', sa.String(5), nullable=True),
        sa.Column('early_entry_open', sa.String(5), nullable=True),
        sa.Column('early_entry_close', sa.String(5), nullable=True),
        sa.Column('extended_evening_open', sa.String(5), nullable=True),
        sa.Column('extended_evening_close', sa.String(5), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'park_crowd_predictions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('park_id', sa.String(64), nullable=False, index=True),
        sa.Column('prediction_date', sa.Date(), nullable=False, index=True),
        sa.Column('wait_time_minutes', sa.Integer(), nullable=False),
        sa.Column(
            'crowd_level',
            sa.SmallInteger(),
            nullable=False,
            comment="2/4/6/8/10 derived from average predicted wait"
        ),
        sa.Column('crowd_level_description', sa.String(32), nullable=False),
        sa.Column('recommendation', sa.String(255), nullable=False),
        sa.Column('data_source', sa.String(32), nullable=False),
        sa.Column('synced_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('park_id', 'prediction_date', name='uq_crowd_predictions_park_date'),
    )

    op.create_table(
        'live_parks',
        sa.Column('park_id', sa.String(64), primary_key=True),
        sa.Column('external_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, comment="operating/limited/closed/unknown"),
        sa.Column('timezone', sa.String(64), nullable=False),
        *_time_columns(),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'live_attractions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('park_id', sa.String(64), nullable=False, index=True),
        sa.Column('attraction_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('wait_time', sa.Integer(), nullable=True, comment="NULL = no standby data, 0 = walk-on"),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('park_id', 'attraction_id', name='uq_live_attractions_park_attraction'),
    )

    op.create_table(
        'live_park_schedules',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('park_id', sa.String(64), nullable=False, index=True),
        sa.Column('schedule_date', sa.Date(), nullable=False, index=True),
        *_time_columns(),
        sa.Column('data_source', sa.String(32), nullable=False),
        sa.Column('is_estimated', sa.Boolean(), nullable=False),
        sa.Column('synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('park_id', 'schedule_date', name='uq_live_park_schedules_park_date'),
    )

    op.create_table(
        'live_park_events',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('park_id', sa.String(64), nullable=False, index=True),
        sa.Column('event_date', sa.Date(), nullable=False, index=True),
        sa.Column('event_type', sa.String(32), nullable=False),
        sa.Column('event_name', sa.String(255), nullable=False),
        sa.Column('event_open', sa.String(5), nullable=True),
        sa.Column('event_close', sa.String(5), nullable=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('data_source', sa.String(32), nullable=False),
        sa.Column('synced_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('park_id', 'event_date', 'event_type', 'event_name',
                            name='uq_live_park_events_natural_key'),
    )

    op.create_table(
        'weather_forecasts',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('location_id', sa.String(64), nullable=False, index=True),
        sa.Column('forecast_date', sa.Date(), nullable=False, index=True),
        sa.Column('forecast_time', sa.DateTime(timezone=True), nullable=True,
                  comment="When the forecast was fetched"),
        sa.Column('temperature_high', sa.SmallInteger(), nullable=False),
        sa.Column('temperature_low', sa.SmallInteger(), nullable=False),
        sa.Column('temperature_feels_like', sa.SmallInteger(), nullable=False),
        sa.Column('humidity', sa.SmallInteger(), nullable=False),
        sa.Column('precipitation_chance', sa.SmallInteger(), nullable=False, comment="0-100"),
        sa.Column('precipitation_amount', sa.Numeric(6, 2), nullable=False),
        sa.Column('weather_condition', sa.String(32), nullable=False),
        sa.Column('weather_description', sa.String(255), nullable=False),
        sa.Column('wind_speed', sa.SmallInteger(), nullable=False),
        sa.Column('wind_direction', sa.SmallInteger(), nullable=False),
        sa.Column('uv_index', sa.SmallInteger(), nullable=True),
        sa.Column('visibility', sa.Numeric(5, 1), nullable=True),
        sa.UniqueConstraint('location_id', 'forecast_date', name='uq_weather_forecasts_location_date'),
    )


def downgrade() -> None:
    op.drop_table('weather_forecasts')
    op.drop_table('live_park_events')
    op.drop_table('live_park_schedules')
    op.drop_table('live_attractions')
    op.drop_table('live_parks')
    op.drop_table('park_crowd_predictions')
