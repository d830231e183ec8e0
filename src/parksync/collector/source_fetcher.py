"""
Park Sync - Source Fetcher
Retrieves raw HTML/JSON from third-party endpoints with browser-like headers.

The fetcher never retries; retry policy belongs to the orchestrators
(see utils/retry.py).
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from ..utils.config import HTTP_TIMEOUT_SECONDS
from ..utils.logger import logger
from .errors import NetworkFailure, ParseError, upstream_error_for_status

BROWSER_HEADERS = {
    'User-Agent': (
        'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36'
    ),
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,application/json;q=0.8,*/*;q=0.7',
    'Accept-Language': 'en-US,en;q=0.9',
    'Cache-Control': 'no-cache',
}


@dataclass
class FetchResult:
    """Raw upstream response body plus HTTP status."""
    body: str
    status_code: int
    url: str


class SourceFetcher:
    """
    HTTP GET wrapper that converts responses into the collector error taxonomy.

    Usage:
        ```python
        fetcher = SourceFetcher()
        result = fetcher.fetch("https://example.com/calendar/2025")
        print(result.status_code, len(result.body))
        ```
    """

    def __init__(self, session: Optional[requests.Session] = None,
                 timeout: float = HTTP_TIMEOUT_SECONDS):
        self.session = session or requests.Session()
        self.session.headers.update(BROWSER_HEADERS)
        self.timeout = timeout

    def fetch(self, url: str, params: Optional[Dict[str, Any]] = None) -> FetchResult:
        """
        Perform a GET request and return the raw body.

        Raises:
            NetworkFailure: Transport-level failure (DNS, timeout, connection reset)
            RateLimited: Upstream returned 429
            Forbidden: Upstream returned 403
            NotFound: Upstream returned 404
            UpstreamError: Any other non-2xx status
        """
        logger.debug(f"Fetching {url}")

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Upstream transport failure", extra={
                'url': url,
                'error_type': type(e).__name__,
                'error': str(e)
            })
            raise NetworkFailure(f"{type(e).__name__}: {e}", url=url) from e

        if not 200 <= response.status_code < 300:
            logger.warning("Upstream returned error status", extra={
                'url': url,
                'status_code': response.status_code,
                'reason': response.reason
            })
            raise upstream_error_for_status(response.status_code, response.reason or '', url)

        return FetchResult(body=response.text, status_code=response.status_code, url=url)

    def fetch_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Fetch and decode a JSON document.

        Raises:
            ParseError: Body is not valid JSON
            FetchError: See fetch()
        """
        result = self.fetch(url, params=params)
        try:
            return json.loads(result.body)
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {url}: {e}", entity=url) from e

    def close(self):
        """Close the HTTP session."""
        self.session.close()
