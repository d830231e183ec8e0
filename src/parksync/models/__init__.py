"""ORM table models; importing this package registers every table on Base.metadata."""

from .base import Base
from .orm_crowd import CrowdPredictionRow
from .orm_live import (
    LiveAttractionRow,
    LiveEntertainmentRow,
    LiveParkEventRow,
    LiveParkRow,
    LiveParkScheduleRow,
    LiveSyncStatusRow,
)
from .orm_weather import WeatherForecastRow

__all__ = [
    'Base',
    'CrowdPredictionRow',
    'LiveAttractionRow',
    'LiveEntertainmentRow',
    'LiveParkEventRow',
    'LiveParkRow',
    'LiveParkScheduleRow',
    'LiveSyncStatusRow',
    'WeatherForecastRow',
]
