"""
Park Sync - Status Calculator
Maps upstream status strings onto the canonical park and attraction vocabularies.
"""

from enum import Enum
from typing import Optional

from ..utils.config import STATUS_UNKNOWN_FALLBACK


class OperatingStatus(Enum):
    """Canonical operating status derived from upstream strings."""
    OPERATING = "OPERATING"
    CLOSED = "CLOSED"
    REFURBISHMENT = "REFURBISHMENT"
    UNKNOWN = "UNKNOWN"


class ParkStatus(Enum):
    OPERATING = "operating"
    LIMITED = "limited"
    CLOSED = "closed"
    UNKNOWN = "unknown"


class AttractionStatus(Enum):
    OPERATING = "operating"
    DELAYED = "delayed"
    DOWN = "down"
    TEMPORARY_CLOSURE = "temporary_closure"
    UNKNOWN = "unknown"


class EntertainmentStatus(Enum):
    OPERATING = "operating"
    DELAYED = "delayed"
    CANCELLED = "cancelled"


_OPERATING_STATUS_ALIASES = {
    'operating': OperatingStatus.OPERATING,
    'open': OperatingStatus.OPERATING,
    'closed': OperatingStatus.CLOSED,
    'refurbishment': OperatingStatus.REFURBISHMENT,
}

_PARK_STATUS_BY_OPERATING_STATUS = {
    OperatingStatus.OPERATING: ParkStatus.OPERATING,
    OperatingStatus.REFURBISHMENT: ParkStatus.LIMITED,
    OperatingStatus.CLOSED: ParkStatus.CLOSED,
    OperatingStatus.UNKNOWN: ParkStatus.UNKNOWN,
}

_ATTRACTION_STATUS_ALIASES = {
    'operating': AttractionStatus.OPERATING,
    'open': AttractionStatus.OPERATING,
    'delayed': AttractionStatus.DELAYED,
    'down': AttractionStatus.DOWN,
    'closed': AttractionStatus.TEMPORARY_CLOSURE,
    'refurbishment': AttractionStatus.TEMPORARY_CLOSURE,
}

_ENTERTAINMENT_STATUS_ALIASES = {
    'operating': EntertainmentStatus.OPERATING,
    'delayed': EntertainmentStatus.DELAYED,
}


def map_operating_status(raw: Optional[str],
                         unknown_fallback: Optional[bool] = None) -> OperatingStatus:
    """
    Map an upstream status string to OperatingStatus (case-insensitive).

    Unrecognized or missing values map to OPERATING unless
    ``unknown_fallback`` (default: STATUS_UNKNOWN_FALLBACK) is set, in which
    case they map to UNKNOWN.

    Examples:
        >>> map_operating_status("Operating")
        <OperatingStatus.OPERATING: 'OPERATING'>
        >>> map_operating_status("REFURBISHMENT")
        <OperatingStatus.REFURBISHMENT: 'REFURBISHMENT'>
        >>> map_operating_status("mystery")
        <OperatingStatus.OPERATING: 'OPERATING'>
        >>> map_operating_status("mystery", unknown_fallback=True)
        <OperatingStatus.UNKNOWN: 'UNKNOWN'>
    """
    if unknown_fallback is None:
        unknown_fallback = STATUS_UNKNOWN_FALLBACK

    status = _OPERATING_STATUS_ALIASES.get((raw or '').strip().lower())
    if status is not None:
        return status
    return OperatingStatus.UNKNOWN if unknown_fallback else OperatingStatus.OPERATING


def park_status(status: OperatingStatus) -> ParkStatus:
    """Collapse an OperatingStatus onto the park vocabulary."""
    return _PARK_STATUS_BY_OPERATING_STATUS[status]


def attraction_status(raw: Optional[str]) -> AttractionStatus:
    """
    Map an upstream attraction status string to the attraction vocabulary.

    Anything unrecognized (including missing) is UNKNOWN.
    """
    return _ATTRACTION_STATUS_ALIASES.get((raw or '').strip().lower(), AttractionStatus.UNKNOWN)


def entertainment_status(raw: Optional[str]) -> EntertainmentStatus:
    """
    Map an upstream show status string to the entertainment vocabulary.

    Only operating and delayed shows are running; every other value
    (including missing) counts as cancelled.
    """
    return _ENTERTAINMENT_STATUS_ALIASES.get((raw or '').strip().lower(), EntertainmentStatus.CANCELLED)


def validate_wait_time(wait_time) -> Optional[int]:
    """
    Validate and sanitize a wait time value.

    Examples:
        >>> validate_wait_time(45)
        45
        >>> validate_wait_time(0)  # Walk-on, not missing
        0
        >>> validate_wait_time(-1)  # Negative values invalid
        >>> validate_wait_time(None)
    """
    if wait_time is None or isinstance(wait_time, bool):
        return None

    try:
        wait_time = int(wait_time)
    except (TypeError, ValueError):
        return None

    # Negative wait times are invalid
    if wait_time < 0:
        return None

    return wait_time
