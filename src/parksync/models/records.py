"""
Normalized pipeline records.

Parsers produce these; repositories turn them into store rows with
``to_row()``. Field names on the rows match the store columns.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional


@dataclass
class CrowdPrediction:
    """One park's predicted crowd level for one calendar date."""
    park_id: str
    prediction_date: date
    wait_time_minutes: int
    crowd_level: int
    description: str
    recommendation: str
    data_source: str = 'thrill_data'
    synced_at: Optional[datetime] = None
    displayed_value: Optional[str] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            'park_id': self.park_id,
            'prediction_date': self.prediction_date,
            'wait_time_minutes': self.wait_time_minutes,
            'crowd_level': self.crowd_level,
            'crowd_level_description': self.description,
            'recommendation': self.recommendation,
            'data_source': self.data_source,
            'synced_at': self.synced_at,
        }


@dataclass
class LiveParkSnapshot:
    """A park's current operational state (one row per park)."""
    park_id: str
    external_id: str
    name: str
    status: str
    timezone: str
    regular_open: Optional[str] = None
    regular_close: Optional[str] = None
    early_entry_open: Optional[str] = None
    early_entry_close: Optional[str] = None
    extended_evening_open: Optional[str] = None
    extended_evening_close: Optional[str] = None
    last_updated: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            'park_id': self.park_id,
            'external_id': self.external_id,
            'name': self.name,
            'status': self.status,
            'timezone': self.timezone,
            'regular_open': self.regular_open,
            'regular_close': self.regular_close,
            'early_entry_open': self.early_entry_open,
            'early_entry_close': self.early_entry_close,
            'extended_evening_open': self.extended_evening_open,
            'extended_evening_close': self.extended_evening_close,
            'last_updated': self.last_updated,
        }


@dataclass
class LiveAttractionSnapshot:
    """One attraction's current wait time and status.

    ``wait_time`` is None when upstream reports no standby data; 0 means walk-on.
    """
    park_id: str
    attraction_id: str
    name: str
    status: str
    wait_time: Optional[int]
    last_updated: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            'park_id': self.park_id,
            'attraction_id': self.attraction_id,
            'name': self.name,
            'status': self.status,
            'wait_time': self.wait_time,
            'last_updated': self.last_updated,
        }


@dataclass
class LiveEntertainmentSnapshot:
    """One show's current status and start times for the day.

    ``next_show_time`` is the first start after the fetch, None once the last show has begun.
    """
    park_id: str
    entertainment_id: str
    name: str
    status: str
    show_times: List[str] = field(default_factory=list)
    next_show_time: Optional[datetime] = None
    last_updated: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            'park_id': self.park_id,
            'entertainment_id': self.entertainment_id,
            'name': self.name,
            'status': self.status,
            'show_times': list(self.show_times),
            'next_show_time': self.next_show_time,
            'last_updated': self.last_updated,
        }


@dataclass
class ParkScheduleDay:
    """Operating hours for one park on one date (clock times in park-local HH:MM)."""
    park_id: str
    schedule_date: date
    regular_open: Optional[str] = None
    regular_close: Optional[str] = None
    early_entry_open: Optional[str] = None
    early_entry_close: Optional[str] = None
    extended_evening_open: Optional[str] = None
    extended_evening_close: Optional[str] = None
    data_source: str = 'themeparks_api'
    is_estimated: bool = False
    synced_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            'park_id': self.park_id,
            'schedule_date': self.schedule_date,
            'regular_open': self.regular_open,
            'regular_close': self.regular_close,
            'early_entry_open': self.early_entry_open,
            'early_entry_close': self.early_entry_close,
            'extended_evening_open': self.extended_evening_open,
            'extended_evening_close': self.extended_evening_close,
            'data_source': self.data_source,
            'is_estimated': self.is_estimated,
            'synced_at': self.synced_at,
        }


@dataclass
class ParkEvent:
    """A special ticketed event held at a park on one date."""
    park_id: str
    event_date: date
    event_name: str
    event_type: str = 'SPECIAL_TICKETED_EVENT'
    event_open: Optional[str] = None
    event_close: Optional[str] = None
    description: Optional[str] = None
    data_source: str = 'themeparks_api'
    synced_at: Optional[datetime] = None

    def to_row(self) -> Dict[str, Any]:
        return {
            'park_id': self.park_id,
            'event_date': self.event_date,
            'event_name': self.event_name,
            'event_type': self.event_type,
            'event_open': self.event_open,
            'event_close': self.event_close,
            'description': self.description,
            'data_source': self.data_source,
            'synced_at': self.synced_at,
        }


@dataclass
class WeatherSample:
    """One sub-day (3-hour) forecast sample, imperial units."""
    timestamp: int
    temperature: float
    feels_like: float
    humidity: float
    condition: str
    description: str
    wind_speed: float
    wind_direction: float
    visibility_meters: Optional[float] = None
    precipitation_probability: float = 0.0
    rain_mm: float = 0.0
    uv_index: Optional[float] = None


@dataclass
class WeatherForecastDay:
    """One location's daily weather summary reduced from sub-day samples."""
    location_id: str
    forecast_date: date
    temperature_high: int
    temperature_low: int
    temperature_feels_like: int
    humidity: int
    precipitation_chance: int
    precipitation_amount: float
    weather_condition: str
    weather_description: str
    wind_speed: int
    wind_direction: int
    uv_index: Optional[int] = None
    visibility: Optional[float] = None
    forecast_time: Optional[datetime] = None
    sample_count: int = field(default=0, compare=False)

    def to_row(self) -> Dict[str, Any]:
        return {
            'location_id': self.location_id,
            'forecast_date': self.forecast_date,
            'forecast_time': self.forecast_time,
            'temperature_high': self.temperature_high,
            'temperature_low': self.temperature_low,
            'temperature_feels_like': self.temperature_feels_like,
            'humidity': self.humidity,
            'precipitation_chance': self.precipitation_chance,
            'precipitation_amount': self.precipitation_amount,
            'weather_condition': self.weather_condition,
            'weather_description': self.weather_description,
            'wind_speed': self.wind_speed,
            'wind_direction': self.wind_direction,
            'uv_index': self.uv_index,
            'visibility': self.visibility,
        }
