"""
Park Sync - ThemeParks.wiki API Client
Fetches live wait times, park status and operating schedules.

API Documentation: https://api.themeparks.wiki/docs/v1/
"""

from typing import Dict, Optional

from ..utils.logger import logger
from .errors import ParseError
from .source_fetcher import SourceFetcher

# ThemeParks.wiki API base URL
THEMEPARKS_WIKI_API_BASE_URL = "https://api.themeparks.wiki/v1"


class ThemeParksWikiClient:
    """
    Client for the ThemeParks.wiki API.

    Retries are applied by the caller (see utils/retry.py), not here.
    """

    def __init__(self, fetcher: Optional[SourceFetcher] = None,
                 base_url: str = THEMEPARKS_WIKI_API_BASE_URL):
        self.fetcher = fetcher or SourceFetcher()
        self.base_url = base_url.rstrip('/')

    def _get_object(self, url: str) -> Dict:
        data = self.fetcher.fetch_json(url)
        if not isinstance(data, dict):
            raise ParseError(f"Expected a JSON object from {url}", entity=url)
        return data

    def get_entity_live(self, entity_id: str) -> Dict:
        """
        Fetch live data (wait times, status) for a park entity.

        Args:
            entity_id: ThemeParks.wiki entity UUID (park)

        Returns:
            Dictionary with a liveData array covering all child entities

        Raises:
            FetchError: See SourceFetcher.fetch()
            ParseError: If the body is not a JSON object
        """
        url = f"{self.base_url}/entity/{entity_id}/live"
        logger.debug(f"Fetching live data for entity {entity_id}")
        return self._get_object(url)

    def get_entity_schedule(self, entity_id: str) -> Dict:
        """
        Fetch the upcoming operating schedule for a park.

        Returns:
            Dictionary with name, timezone and a schedule array
        """
        url = f"{self.base_url}/entity/{entity_id}/schedule"
        logger.debug(f"Fetching schedule for entity {entity_id}")
        return self._get_object(url)

    def get_entity_schedule_month(self, entity_id: str, year: int, month: int) -> Dict:
        """Fetch the operating schedule for one calendar month."""
        url = f"{self.base_url}/entity/{entity_id}/schedule/{year}/{month:02d}"
        logger.debug(f"Fetching schedule for entity {entity_id} ({year}-{month:02d})")
        return self._get_object(url)

    def close(self):
        """Close the underlying HTTP session."""
        self.fetcher.close()
