"""
SQLAlchemy ORM Models: Crowd Predictions
One row per (park, date) predicted crowd level.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Integer, SmallInteger, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class CrowdPredictionRow(Base):
    """Predicted crowd level imported from the Thrill Data calendar."""
    __tablename__ = "park_crowd_predictions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    park_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    prediction_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    wait_time_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    crowd_level: Mapped[int] = mapped_column(
        SmallInteger,
        nullable=False,
        comment="2/4/6/8/10 derived from average predicted wait"
    )
    crowd_level_description: Mapped[str] = mapped_column(String(32), nullable=False)
    recommendation: Mapped[str] = mapped_column(String(255), nullable=False)
    data_source: Mapped[str] = mapped_column(String(32), nullable=False, default='thrill_data')

    synced_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint('park_id', 'prediction_date', name='uq_crowd_predictions_park_date'),
    )

    def __repr__(self) -> str:
        return f"<CrowdPredictionRow(park_id={self.park_id}, date={self.prediction_date}, level={self.crowd_level})>"
