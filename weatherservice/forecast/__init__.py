from .models import Forecast, WeatherForecastRecord, SUMMARIES
from .store import ForecastStore
from .seeder import SeedTask
from .service import ForecastService

__all__ = ["Forecast", "WeatherForecastRecord", "SUMMARIES", "ForecastStore", "SeedTask", "ForecastService"]
