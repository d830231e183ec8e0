"""
Park Sync - Crowd Calendar Parser
Extracts per-day predicted wait times from Thrill Data calendar HTML.

Each calendar cell carries a title attribute of the form:

    title='Predicted wait time of 31 minutes on Jan 01'>31</div>

The extraction regex lives in a CalendarPattern so a markup change on the
upstream site only requires a new pattern version.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterator, List, Optional, Pattern

from ..models.records import CrowdPrediction
from ..processor.crowd_levels import (
    crowd_level_description,
    crowd_level_for_wait_time,
    crowd_recommendation,
)
from ..utils.logger import logger
from .errors import ParseError

MONTH_ABBREVIATIONS = {
    'jan': 1, 'feb': 2, 'mar': 3, 'apr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'aug': 8, 'sep': 9, 'oct': 10, 'nov': 11, 'dec': 12,
}


@dataclass(frozen=True)
class CalendarPattern:
    """
    Versioned extraction pattern for calendar cells.

    Group 1 is the attribute quote; groups 2-5 are wait minutes, month
    abbreviation, day of month and displayed value. Groups are allowed to match
    empty so malformed cells surface as skipped diagnostics instead of
    silently disappearing.
    """
    version: str
    regex: Pattern


DEFAULT_PATTERN = CalendarPattern(
    version='title-v1',
    regex=re.compile(
        r"""title=(['"])Predicted wait time of\s*(\d*)\s*minutes on\s*([A-Za-z]*)\s*(\d*)\1\s*>([^<]*)<""",
        re.IGNORECASE,
    ),
)


class CrowdCalendarParser:
    """
    Turns calendar HTML into CrowdPrediction records.

    Usage:
        ```python
        parser = CrowdCalendarParser()
        predictions = list(parser.parse(html, 2025, 'magic-kingdom'))
        for skipped in parser.skipped:
            print(skipped.fragment, skipped)
        ```
    """

    def __init__(self, pattern: CalendarPattern = DEFAULT_PATTERN):
        self.pattern = pattern
        self.skipped: List[ParseError] = []

    def parse(self, html: str, year: int, park_id: str,
              synced_at: Optional[datetime] = None) -> Iterator[CrowdPrediction]:
        """
        Lazily yield one CrowdPrediction per well-formed calendar cell.

        Malformed cells are logged at WARNING, appended to ``self.skipped``
        and do not stop the scan.

        Raises:
            ParseError: If ``html`` is not a string
        """
        if not isinstance(html, str):
            raise ParseError(
                f"Calendar document must be text, got {type(html).__name__}",
                entity=park_id,
            )

        self.skipped = []

        for match in self.pattern.regex.finditer(html):
            fragment = match.group(0)
            try:
                prediction = self._build_prediction(match, year, park_id, synced_at)
            except ParseError as e:
                logger.warning("Skipped calendar cell", extra={
                    "park_id": park_id,
                    "pattern_version": self.pattern.version,
                    "fragment": fragment,
                    "reason": str(e)
                })
                self.skipped.append(e)
                continue
            yield prediction

    def _build_prediction(self, match, year: int, park_id: str,
                          synced_at: Optional[datetime]) -> CrowdPrediction:
        wait_text, month_text, day_text, displayed = (
            match.group(2), match.group(3), match.group(4), match.group(5)
        )
        fragment = match.group(0)

        if not wait_text or not month_text or not day_text or not displayed.strip():
            raise ParseError("Calendar cell is missing a field", entity=park_id, fragment=fragment)

        month = MONTH_ABBREVIATIONS.get(month_text.lower())
        if month is None or len(month_text) != 3:
            raise ParseError(f"Unknown month abbreviation '{month_text}'",
                             entity=park_id, fragment=fragment)

        try:
            prediction_date = date(year, month, int(day_text))
        except ValueError as e:
            raise ParseError(f"Invalid date {month_text} {day_text} {year}: {e}",
                             entity=park_id, fragment=fragment) from e

        wait_time = int(wait_text)
        level = crowd_level_for_wait_time(wait_time)

        return CrowdPrediction(
            park_id=park_id,
            prediction_date=prediction_date,
            wait_time_minutes=wait_time,
            crowd_level=level,
            description=crowd_level_description(level),
            recommendation=crowd_recommendation(level),
            synced_at=synced_at,
            displayed_value=displayed.strip(),
        )
