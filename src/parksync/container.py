"""Dependency container wiring clients, store, repositories and jobs."""

from typing import List, Optional

from .collector.openweather_client import OpenWeatherClient
from .collector.park_mappings import DEFAULT_WEATHER_LOCATION, ParkConfig, WeatherLocation, load_parks
from .collector.source_fetcher import SourceFetcher
from .collector.themeparks_wiki_client import ThemeParksWikiClient
from .collector.thrill_data_client import ThrillDataClient
from .database.connection import DatabaseConnection
from .database.repositories.crowd_prediction_repository import CrowdPredictionRepository
from .database.repositories.live_data_repository import LiveDataRepository
from .database.repositories.schedule_repository import ScheduleRepository
from .database.repositories.sync_status_repository import SyncStatusRepository
from .database.repositories.weather_repository import WeatherForecastRepository
from .database.upsert import SimulatedWriter, UpsertWriter
from .scripts.fetch_weather import WeatherForecastJob
from .scripts.import_crowd_calendar import CrowdCalendarImporter
from .scripts.sync_parks import ParkSyncJob
from .utils.config import OPENWEATHER_API_KEY
from .utils.logger import logger


class Container:
    """
    Builds the object graph for one process.

    Every collaborator can be overridden, which is how tests swap in fakes:

        container = Container(db=DatabaseConnection('sqlite://'), pacing=NoPacing())
    """

    def __init__(self, db: Optional[DatabaseConnection] = None,
                 fetcher: Optional[SourceFetcher] = None,
                 parks: Optional[List[ParkConfig]] = None,
                 weather_location: WeatherLocation = DEFAULT_WEATHER_LOCATION,
                 openweather_api_key: Optional[str] = None,
                 pacing=None, retrying=None):
        self.db = db if db is not None else DatabaseConnection()
        self.fetcher = fetcher if fetcher is not None else SourceFetcher()
        self.parks = parks if parks is not None else load_parks()
        self.weather_location = weather_location
        self.pacing = pacing
        self.retrying = retrying

        if self.db.is_configured:
            self.writer = UpsertWriter(self.db)
        else:
            logger.warning("DATABASE_URL not configured; writes will be simulated")
            self.writer = SimulatedWriter()

        self.thrill_data_client = ThrillDataClient(self.fetcher)
        self.themeparks_client = ThemeParksWikiClient(self.fetcher)
        self.openweather_client = OpenWeatherClient(
            openweather_api_key if openweather_api_key is not None else OPENWEATHER_API_KEY,
            self.fetcher,
        )

        self.crowd_repository = CrowdPredictionRepository(self.writer, self.db)
        self.live_repository = LiveDataRepository(self.writer)
        self.schedule_repository = ScheduleRepository(self.writer)
        self.weather_repository = WeatherForecastRepository(self.writer)
        self.sync_status_repository = SyncStatusRepository(self.writer, self.db)

    @property
    def simulated(self) -> bool:
        return self.writer.simulated

    def crowd_importer(self) -> CrowdCalendarImporter:
        return CrowdCalendarImporter(self.thrill_data_client, self.crowd_repository, self.parks,
                                     pacing=self.pacing, retrying=self.retrying,
                                     status_repository=self.sync_status_repository)

    def park_sync_job(self) -> ParkSyncJob:
        return ParkSyncJob(self.themeparks_client, self.live_repository, self.schedule_repository,
                           self.parks, pacing=self.pacing, retrying=self.retrying,
                           status_repository=self.sync_status_repository)

    def weather_job(self) -> WeatherForecastJob:
        return WeatherForecastJob(self.openweather_client, self.weather_repository,
                                  self.weather_location, retrying=self.retrying,
                                  status_repository=self.sync_status_repository)
