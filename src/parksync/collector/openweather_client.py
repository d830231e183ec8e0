"""
Park Sync - OpenWeatherMap Client
Fetches the 5 day / 3 hour forecast feed in imperial units.

API Documentation: https://openweathermap.org/forecast5
"""

from typing import Dict, Optional

from ..utils.config import ConfigurationError
from ..utils.logger import logger
from .errors import ParseError
from .source_fetcher import SourceFetcher

OPENWEATHER_FORECAST_URL = "https://api.openweathermap.org/data/2.5/forecast"


class OpenWeatherClient:
    """Client for the OpenWeatherMap forecast API."""

    def __init__(self, api_key: Optional[str], fetcher: Optional[SourceFetcher] = None,
                 forecast_url: str = OPENWEATHER_FORECAST_URL):
        self.api_key = api_key
        self.fetcher = fetcher or SourceFetcher()
        self.forecast_url = forecast_url

    def get_forecast(self, latitude: float, longitude: float) -> Dict:
        """
        Fetch 3-hourly forecast samples for a coordinate.

        Returns:
            Feed document with a ``list`` of samples

        Raises:
            ConfigurationError: If no API key is configured
            FetchError: See SourceFetcher.fetch()
            ParseError: If the body is not a JSON object
        """
        if not self.api_key:
            raise ConfigurationError("OPENWEATHER_API_KEY not configured")

        params = {
            'lat': latitude,
            'lon': longitude,
            'appid': self.api_key,
            'units': 'imperial',
        }
        logger.debug(f"Fetching weather forecast for ({latitude}, {longitude})")

        data = self.fetcher.fetch_json(self.forecast_url, params=params)
        if not isinstance(data, dict):
            raise ParseError("Expected a JSON object from forecast feed", entity=self.forecast_url)
        return data
