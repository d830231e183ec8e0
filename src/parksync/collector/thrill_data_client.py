"""
Park Sync - Thrill Data Client
Fetches crowd calendar HTML pages from thrill-data.com.
"""

from typing import Optional

from ..utils.logger import logger
from .source_fetcher import SourceFetcher

THRILL_DATA_BASE_URL = "https://www.thrill-data.com/trip-planning/crowd-calendar"


class ThrillDataClient:
    """
    Client for the Thrill Data crowd calendar.

    The calendar is published as HTML only; parsing happens in
    crowd_calendar_parser.
    """

    def __init__(self, fetcher: Optional[SourceFetcher] = None,
                 base_url: str = THRILL_DATA_BASE_URL):
        self.fetcher = fetcher or SourceFetcher()
        self.base_url = base_url.rstrip('/')

    def calendar_url(self, thrill_data_id: str, year: int) -> str:
        return f"{self.base_url}/{thrill_data_id}/calendar/{year}"

    def get_crowd_calendar(self, thrill_data_id: str, year: int) -> str:
        """
        Fetch the crowd calendar page for one park and year.

        Returns:
            Raw HTML body

        Raises:
            FetchError: See SourceFetcher.fetch()
        """
        url = self.calendar_url(thrill_data_id, year)
        logger.debug(f"Fetching crowd calendar for {thrill_data_id} ({year})")

        result = self.fetcher.fetch(url)
        logger.debug(f"Fetched {len(result.body)} bytes of calendar HTML from {url}")
        return result.body
