"""
Park Sync - Park and Location Mappings

Maps our park identifiers to the identifiers used by each upstream source.
The mapping is injected into the orchestrators; DEFAULT_PARKS is only the
fallback when no PARKS_FILE is configured.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..utils.config import (
    PARKS_FILE,
    WEATHER_LOCATION_ID,
    WEATHER_LOCATION_LATITUDE,
    WEATHER_LOCATION_LONGITUDE,
    WEATHER_LOCATION_NAME,
)


@dataclass(frozen=True)
class ParkConfig:
    """One park and its upstream identifiers."""
    park_id: str
    themeparks_wiki_id: str
    thrill_data_id: str
    display_name: str
    timezone: str = 'America/New_York'


@dataclass(frozen=True)
class WeatherLocation:
    """A point for which daily weather summaries are produced."""
    location_id: str
    name: str
    latitude: float
    longitude: float


DEFAULT_PARKS: List[ParkConfig] = [
    ParkConfig(
        park_id='magic-kingdom',
        themeparks_wiki_id='75ea578a-adc8-4116-a54d-dccb60765ef9',
        thrill_data_id='magic-kingdom',
        display_name='Magic Kingdom',
    ),
    ParkConfig(
        park_id='epcot',
        themeparks_wiki_id='47f90d2c-e191-4239-a466-5892ef59a88b',
        thrill_data_id='epcot',
        display_name='EPCOT',
    ),
    ParkConfig(
        park_id='hollywood-studios',
        themeparks_wiki_id='288747d1-8b4f-4a64-867e-ea7c9b27bad8',
        thrill_data_id='hollywood-studios',
        display_name="Disney's Hollywood Studios",
    ),
    ParkConfig(
        park_id='animal-kingdom',
        themeparks_wiki_id='1c84a229-8862-4648-9c71-378ddd2c7693',
        thrill_data_id='animal-kingdom',
        display_name="Disney's Animal Kingdom",
    ),
]


DEFAULT_WEATHER_LOCATION = WeatherLocation(
    location_id=WEATHER_LOCATION_ID,
    name=WEATHER_LOCATION_NAME,
    latitude=WEATHER_LOCATION_LATITUDE,
    longitude=WEATHER_LOCATION_LONGITUDE,
)


def load_parks(path: Optional[str] = None) -> List[ParkConfig]:
    """
    Load the park list from a JSON file, or return DEFAULT_PARKS.

    The file holds a list of objects with ParkConfig field names.

    Raises:
        ValueError: If the file is not a JSON list of park objects
    """
    path = path if path is not None else PARKS_FILE
    if not path:
        return list(DEFAULT_PARKS)

    data = json.loads(Path(path).read_text(encoding='utf-8'))
    if not isinstance(data, list):
        raise ValueError(f"Park file {path} must contain a JSON list")
    try:
        return [ParkConfig(**entry) for entry in data]
    except TypeError as e:
        raise ValueError(f"Invalid park entry in {path}: {e}") from e
