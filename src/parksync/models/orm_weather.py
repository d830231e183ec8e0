"""
SQLAlchemy ORM Models: Weather Forecasts
Daily forecast summaries per location.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Integer, Numeric, SmallInteger, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class WeatherForecastRow(Base):
    """
    Daily weather summary reduced from 3-hourly forecast samples.
    Units are imperial (°F, mph, inches, miles).
    """
    __tablename__ = "weather_forecasts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    location_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    forecast_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    forecast_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        comment="When the forecast was fetched"
    )

    temperature_high: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    temperature_low: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    temperature_feels_like: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    humidity: Mapped[int] = mapped_column(SmallInteger, nullable=False)

    precipitation_chance: Mapped[int] = mapped_column(SmallInteger, nullable=False, comment="0-100")
    precipitation_amount: Mapped[float] = mapped_column(Numeric(6, 2, asdecimal=False), nullable=False)

    weather_condition: Mapped[str] = mapped_column(String(32), nullable=False)
    weather_description: Mapped[str] = mapped_column(String(255), nullable=False)

    wind_speed: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    wind_direction: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    uv_index: Mapped[Optional[int]] = mapped_column(SmallInteger)
    visibility: Mapped[Optional[float]] = mapped_column(Numeric(5, 1, asdecimal=False))

    __table_args__ = (
        UniqueConstraint('location_id', 'forecast_date', name='uq_weather_forecasts_location_date'),
    )

    def __repr__(self) -> str:
        return f"<WeatherForecastRow(location_id={self.location_id}, date={self.forecast_date})>"
