"""
Service layer: read-only access to stored forecasts and the configured location.
"""
import logging
from typing import List

from weatherservice.forecast.models import Forecast
from weatherservice.forecast.store import ForecastStore

logger = logging.getLogger(__name__)


class ForecastService:
    def __init__(self, store: ForecastStore, location: str):
        self.store = store
        self.location = location

    def get_forecasts(self) -> List[Forecast]:
        """Return all stored forecasts, unfiltered. StorageReadError propagates."""
        logger.debug("Weather is good")
        return self.store.get_all()

    def get_location(self) -> str:
        return self.location
