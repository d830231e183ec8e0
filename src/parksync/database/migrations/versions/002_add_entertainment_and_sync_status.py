"""Add live entertainment and sync status tables

Revision ID: 002_entertainment_status
Revises: 001_sync_tables
Create Date: 2025-10-20

Adds per-show status and start times (live_entertainment) and per-job
run counters (live_sync_status).
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002_entertainment_status'
down_revision = '001_sync_tables'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'live_entertainment',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('park_id', sa.String(64), nullable=False, index=True),
        sa.Column('entertainment_id', sa.String(64), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('status', sa.String(16), nullable=False, comment="operating/delayed/cancelled"),
        sa.Column('show_times', sa.JSON(), nullable=False, comment="ISO-8601 start times"),
        sa.Column('next_show_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('park_id', 'entertainment_id', name='uq_live_entertainment_park_show'),
    )

    op.create_table(
        'live_sync_status',
        sa.Column('service_name', sa.String(64), primary_key=True),
        sa.Column('last_sync_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_success_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_syncs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('successful_syncs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('failed_syncs', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_error', sa.Text(), nullable=True),
    )


def downgrade() -> None:
    op.drop_table('live_sync_status')
    op.drop_table('live_entertainment')
