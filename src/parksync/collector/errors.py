"""
Park Sync - Collector Error Taxonomy

FetchError
├── NetworkFailure      transport-level failure (DNS, timeout, reset)
└── UpstreamError       non-2xx HTTP response
    ├── RateLimited     429
    ├── Forbidden       403
    └── NotFound        404

ParseError is raised when upstream content does not have the expected shape.
"""

from typing import Optional


class FetchError(Exception):
    """Base class for failures retrieving upstream content."""

    def __init__(self, message: str, url: Optional[str] = None):
        super().__init__(message)
        self.url = url


class NetworkFailure(FetchError):
    """Transport-level failure: no HTTP response was received."""
    pass


class UpstreamError(FetchError):
    """Upstream answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = '', url: Optional[str] = None):
        self.status_code = status_code
        self.reason = reason or ''
        message = f"HTTP {status_code}"
        if self.reason:
            message = f"{message} {self.reason}"
        super().__init__(message, url=url)


class RateLimited(UpstreamError):
    """Upstream returned 429 Too Many Requests."""
    pass


class Forbidden(UpstreamError):
    """Upstream returned 403 Forbidden."""
    pass


class NotFound(UpstreamError):
    """Upstream returned 404 Not Found."""
    pass


class ParseError(Exception):
    """Upstream content could not be turned into normalized records."""

    def __init__(self, message: str, entity: Optional[str] = None, fragment: Optional[str] = None):
        super().__init__(message)
        self.entity = entity
        self.fragment = fragment


def upstream_error_for_status(status_code: int, reason: str = '', url: Optional[str] = None) -> UpstreamError:
    """Return the most specific UpstreamError subclass for an HTTP status."""
    if status_code == 429:
        return RateLimited(status_code, reason, url)
    if status_code == 403:
        return Forbidden(status_code, reason, url)
    if status_code == 404:
        return NotFound(status_code, reason, url)
    return UpstreamError(status_code, reason, url)
