"""
Park Sync - Weather Aggregator
Reduces 3-hourly forecast samples into one summary per UTC calendar date.
"""

from collections import Counter, OrderedDict
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from ..collector.errors import ParseError
from ..models.records import WeatherForecastDay, WeatherSample
from ..utils.logger import logger

METERS_PER_MILE = 1609.344
MM_PER_INCH = 25.4

# Upstream condition group -> stored vocabulary
WEATHER_CONDITION_MAP = {
    'clear': 'clear',
    'clouds': 'clouds',
    'rain': 'rain',
    'drizzle': 'rain',
    'thunderstorm': 'thunderstorm',
    'snow': 'snow',
    'mist': 'cloudy',
    'fog': 'cloudy',
    'haze': 'cloudy',
}
DEFAULT_WEATHER_CONDITION = 'clear'


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with halves away from zero (Python's round() is banker's rounding)."""
    exponent = Decimal(1).scaleb(-digits)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def map_weather_condition(raw: Optional[str]) -> str:
    return WEATHER_CONDITION_MAP.get((raw or '').lower(), DEFAULT_WEATHER_CONDITION)


def _mean(values: List[float]) -> float:
    return sum(values) / len(values)


def parse_weather_samples(payload: Any) -> List[WeatherSample]:
    """
    Convert the forecast feed into WeatherSample records.

    Raises:
        ParseError: If the feed has no ``list`` of samples or a sample lacks
            its timestamp or main readings
    """
    if not isinstance(payload, dict) or not isinstance(payload.get('list'), list):
        raise ParseError("Forecast feed is missing its 'list' of samples")

    samples = []
    for item in payload['list']:
        try:
            main = item['main']
            weather = (item.get('weather') or [{}])[0]
            wind = item.get('wind') or {}
            rain = item.get('rain') or {}
            samples.append(WeatherSample(
                timestamp=int(item['dt']),
                temperature=float(main['temp']),
                feels_like=float(main.get('feels_like', main['temp'])),
                humidity=float(main.get('humidity', 0)),
                condition=(weather.get('main') or '').lower(),
                description=weather.get('description') or '',
                wind_speed=float(wind.get('speed', 0)),
                wind_direction=float(wind.get('deg', 0)),
                visibility_meters=item.get('visibility'),
                precipitation_probability=float(item.get('pop', 0) or 0),
                rain_mm=float(rain.get('3h', 0) or 0),
                uv_index=item.get('uvi'),
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise ParseError(f"Malformed forecast sample: {e}", fragment=str(item)[:200]) from e

    return samples


def _sample_date(sample: WeatherSample) -> date:
    return datetime.fromtimestamp(sample.timestamp, tz=timezone.utc).date()


def _dominant_condition(samples: List[WeatherSample]) -> WeatherSample:
    """First sample carrying the most frequent raw condition (ties: first seen)."""
    counts = Counter(sample.condition for sample in samples)
    best = max(counts.values())
    for sample in samples:
        if counts[sample.condition] == best:
            return sample
    return samples[0]


def _summarize_day(location_id: str, day: date, samples: List[WeatherSample],
                   fetched_at: Optional[datetime]) -> WeatherForecastDay:
    temperatures = [s.temperature for s in samples]
    uv_values = [s.uv_index for s in samples if s.uv_index is not None]
    visibilities = [s.visibility_meters for s in samples if s.visibility_meters is not None]
    dominant = _dominant_condition(samples)

    precipitation_chance = int(round_half_up(max(s.precipitation_probability for s in samples) * 100))

    return WeatherForecastDay(
        location_id=location_id,
        forecast_date=day,
        temperature_high=int(round_half_up(max(temperatures))),
        temperature_low=int(round_half_up(min(temperatures))),
        temperature_feels_like=int(round_half_up(_mean([s.feels_like for s in samples]))),
        humidity=int(round_half_up(_mean([s.humidity for s in samples]))),
        precipitation_chance=max(0, min(100, precipitation_chance)),
        precipitation_amount=round_half_up(_mean([s.rain_mm for s in samples]) / MM_PER_INCH, 2),
        weather_condition=map_weather_condition(dominant.condition),
        weather_description=dominant.description,
        wind_speed=int(round_half_up(_mean([s.wind_speed for s in samples]))),
        wind_direction=int(round_half_up(_mean([s.wind_direction for s in samples]))),
        uv_index=int(round_half_up(_mean(uv_values))) if uv_values else None,
        visibility=round_half_up(_mean(visibilities) / METERS_PER_MILE, 1) if visibilities else None,
        forecast_time=fetched_at,
        sample_count=len(samples),
    )


def aggregate_daily(samples: Iterable[WeatherSample], location_id: str,
                    fetched_at: Optional[datetime] = None) -> List[WeatherForecastDay]:
    """
    Group samples by UTC date and reduce each group to a WeatherForecastDay.

    Returns one record per date that has samples, ordered by date.
    """
    by_date: Dict[date, List[WeatherSample]] = OrderedDict()
    for sample in samples:
        by_date.setdefault(_sample_date(sample), []).append(sample)

    days = [
        _summarize_day(location_id, day, day_samples, fetched_at)
        for day, day_samples in sorted(by_date.items())
    ]
    logger.debug(f"Aggregated {sum(d.sample_count for d in days)} samples into {len(days)} days")
    return days
