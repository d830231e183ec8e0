"""
Unit Tests: Weather Aggregator

Tests feed parsing and daily reduction of 3-hourly samples.

Timestamps used:
- 1741910400 = 2025-03-14 00:00 UTC
- 1741996800 = 2025-03-15 00:00 UTC
"""

from datetime import date, datetime, timezone

import pytest

from conftest import weather_sample
from parksync.collector.errors import ParseError
from parksync.processor.weather_aggregator import (
    aggregate_daily,
    map_weather_condition,
    parse_weather_samples,
    round_half_up,
)

DAY_ONE = 1741910400
DAY_TWO = 1741996800
HOURS_3 = 3 * 3600


def _aggregate(items):
    return aggregate_daily(parse_weather_samples({'list': items}), 'walt-disney-world')


class TestParseWeatherSamples:

    def test_fields(self):
        item = weather_sample(DAY_ONE, 72.5, 'Rain', 'light rain', rain={'3h': 1.2}, pop=0.4, uvi=6.1)

        [sample] = parse_weather_samples({'list': [item]})

        assert sample.timestamp == DAY_ONE
        assert sample.temperature == 72.5
        assert sample.condition == 'rain'
        assert sample.description == 'light rain'
        assert sample.rain_mm == 1.2
        assert sample.precipitation_probability == 0.4
        assert sample.uv_index == 6.1

    @pytest.mark.parametrize('payload', [{}, {'list': None}, [], 'oops'])
    def test_missing_list_raises(self, payload):
        with pytest.raises(ParseError):
            parse_weather_samples(payload)

    def test_sample_without_main_raises(self):
        with pytest.raises(ParseError):
            parse_weather_samples({'list': [{'dt': DAY_ONE}]})


class TestAggregateDaily:

    def test_high_and_low(self):
        items = [weather_sample(DAY_ONE + i * HOURS_3, t) for i, t in enumerate([70, 75, 68])]

        [day] = _aggregate(items)

        assert day.forecast_date == date(2025, 3, 14)
        assert day.temperature_high == 75
        assert day.temperature_low == 68
        assert day.sample_count == 3

    def test_groups_by_utc_date_in_order(self):
        items = [
            weather_sample(DAY_TWO + HOURS_3, 80),
            weather_sample(DAY_ONE, 70),
            weather_sample(DAY_TWO, 78),
        ]

        days = _aggregate(items)

        assert [d.forecast_date for d in days] == [date(2025, 3, 14), date(2025, 3, 15)]
        assert days[1].temperature_high == 80

    def test_means_round_half_up(self):
        items = [
            weather_sample(DAY_ONE, 70, main={'temp': 70, 'feels_like': 70, 'humidity': 60},
                           wind={'speed': 4, 'deg': 90}),
            weather_sample(DAY_ONE + HOURS_3, 71, main={'temp': 71, 'feels_like': 71, 'humidity': 61},
                           wind={'speed': 5, 'deg': 91}),
        ]

        [day] = _aggregate(items)

        assert day.temperature_feels_like == 71
        assert day.humidity == 61
        assert day.wind_speed == 5
        assert day.wind_direction == 91

    def test_precipitation(self):
        items = [
            weather_sample(DAY_ONE, 70, pop=0.2, rain={'3h': 2.54}),
            weather_sample(DAY_ONE + HOURS_3, 70, pop=0.65),
        ]

        [day] = _aggregate(items)

        assert day.precipitation_chance == 65
        # mean(2.54, 0) mm = 1.27 mm = 0.05 in
        assert day.precipitation_amount == 0.05

    def test_visibility_in_miles(self):
        items = [
            weather_sample(DAY_ONE, 70, visibility=10000),
            weather_sample(DAY_ONE + HOURS_3, 70, visibility=6000),
        ]

        [day] = _aggregate(items)

        assert day.visibility == 5.0

    def test_uv_only_from_reporting_samples(self):
        items = [
            weather_sample(DAY_ONE, 70, uvi=4),
            weather_sample(DAY_ONE + HOURS_3, 70, uvi=7),
            weather_sample(DAY_ONE + 2 * HOURS_3, 70),
        ]

        [day] = _aggregate(items)

        assert day.uv_index == 6

    def test_uv_absent(self):
        [day] = _aggregate([weather_sample(DAY_ONE, 70)])

        assert day.uv_index is None

    def test_dominant_condition_and_description(self):
        items = [
            weather_sample(DAY_ONE, 70, 'Clouds', 'few clouds'),
            weather_sample(DAY_ONE + HOURS_3, 70, 'Drizzle', 'light drizzle'),
            weather_sample(DAY_ONE + 2 * HOURS_3, 70, 'Drizzle', 'drizzle'),
        ]

        [day] = _aggregate(items)

        assert day.weather_condition == 'rain'
        assert day.weather_description == 'light drizzle'

    def test_dominant_condition_tie_takes_first_seen(self):
        items = [
            weather_sample(DAY_ONE, 70, 'Mist', 'mist'),
            weather_sample(DAY_ONE + HOURS_3, 70, 'Clear', 'clear sky'),
        ]

        [day] = _aggregate(items)

        assert day.weather_condition == 'cloudy'
        assert day.weather_description == 'mist'

    def test_empty_input_emits_nothing(self):
        assert aggregate_daily([], 'walt-disney-world') == []

    def test_forecast_time_recorded(self):
        fetched_at = datetime(2025, 3, 14, 6, 0, tzinfo=timezone.utc)

        [day] = aggregate_daily(parse_weather_samples({'list': [weather_sample(DAY_ONE, 70)]}),
                                'walt-disney-world', fetched_at)

        assert day.forecast_time == fetched_at
        assert day.location_id == 'walt-disney-world'


class TestHelpers:

    @pytest.mark.parametrize('raw,expected', [
        ('Clear', 'clear'), ('Clouds', 'clouds'), ('Rain', 'rain'), ('Drizzle', 'rain'),
        ('Thunderstorm', 'thunderstorm'), ('Snow', 'snow'), ('Mist', 'cloudy'),
        ('Fog', 'cloudy'), ('Haze', 'cloudy'), ('Tornado', 'clear'), (None, 'clear'),
    ])
    def test_condition_map(self, raw, expected):
        assert map_weather_condition(raw) == expected

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(70.5) == 71
        assert round_half_up(-0.5) == -1
        assert round_half_up(0.125, 2) == 0.13
