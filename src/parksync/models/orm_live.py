"""
SQLAlchemy ORM Models: Live Park Data
Current park state, attraction wait times, show times, per-date schedules,
special events and per-job sync bookkeeping.
"""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class LiveParkRow(Base):
    """Current operational state of a park (one row per park)."""
    __tablename__ = "live_parks"

    park_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    external_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, comment="operating/limited/closed/unknown")
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)

    # Clock times are park-local "HH:MM"
    regular_open: Mapped[Optional[str]] = mapped_column(String(5))
    regular_close: Mapped[Optional[str]] = mapped_column(String(5))
    early_entry_open: Mapped[Optional[str]] = mapped_column(String(5))
    early_entry_close: Mapped[Optional[str]] = mapped_column(String(5))
    extended_evening_open: Mapped[Optional[str]] = mapped_column(String(5))
    extended_evening_close: Mapped[Optional[str]] = mapped_column(String(5))

    last_updated: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    def __repr__(self) -> str:
        return f"<LiveParkRow(park_id={self.park_id}, status={self.status})>"


class LiveAttractionRow(Base):
    """Current wait time and status of one attraction."""
    __tablename__ = "live_attractions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    park_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    attraction_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(32), nullable=False)
    wait_time: Mapped[Optional[int]] = mapped_column(Integer, comment="NULL = no standby data, 0 = walk-on")
    last_updated: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint('park_id', 'attraction_id', name='uq_live_attractions_park_attraction'),
    )


class LiveParkScheduleRow(Base):
    """Operating hours for a park on one date."""
    __tablename__ = "live_park_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    park_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    schedule_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    regular_open: Mapped[Optional[str]] = mapped_column(String(5))
    regular_close: Mapped[Optional[str]] = mapped_column(String(5))
    early_entry_open: Mapped[Optional[str]] = mapped_column(String(5))
    early_entry_close: Mapped[Optional[str]] = mapped_column(String(5))
    extended_evening_open: Mapped[Optional[str]] = mapped_column(String(5))
    extended_evening_close: Mapped[Optional[str]] = mapped_column(String(5))

    data_source: Mapped[str] = mapped_column(String(32), nullable=False, default='themeparks_api')
    is_estimated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    synced_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint('park_id', 'schedule_date', name='uq_live_park_schedules_park_date'),
    )


class LiveParkEventRow(Base):
    """Special ticketed event (after-hours party etc.) on one date."""
    __tablename__ = "live_park_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    park_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    event_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    event_type: Mapped[str] = mapped_column(String(32), nullable=False)
    event_name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_open: Mapped[Optional[str]] = mapped_column(String(5))
    event_close: Mapped[Optional[str]] = mapped_column(String(5))
    description: Mapped[Optional[str]] = mapped_column(String(255))
    data_source: Mapped[str] = mapped_column(String(32), nullable=False, default='themeparks_api')
    synced_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint('park_id', 'event_date', 'event_type', 'event_name',
                         name='uq_live_park_events_natural_key'),
    )


class LiveEntertainmentRow(Base):
    """Current status and today's show times of one show or parade."""
    __tablename__ = "live_entertainment"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    park_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    entertainment_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, comment="operating/delayed/cancelled")
    show_times: Mapped[List[str]] = mapped_column(JSON, nullable=False, comment="ISO-8601 start times")
    next_show_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_updated: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        UniqueConstraint('park_id', 'entertainment_id', name='uq_live_entertainment_park_show'),
    )


class LiveSyncStatusRow(Base):
    """Run bookkeeping for one sync job (one row per job)."""
    __tablename__ = "live_sync_status"

    service_name: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_sync_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_success_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    total_syncs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    successful_syncs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    failed_syncs: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[Optional[str]] = mapped_column(Text)

    def __repr__(self) -> str:
        return f"<LiveSyncStatusRow(service_name={self.service_name}, total_syncs={self.total_syncs})>"
