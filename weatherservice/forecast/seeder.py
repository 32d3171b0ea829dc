"""
One-shot seed task: create the forecast store if absent and fill it with sample forecasts.
"""
import logging
import random
from datetime import date, timedelta
from typing import Callable, List

from weatherservice.core.config import SeedConfig
from weatherservice.forecast.models import SUMMARIES, Forecast
from weatherservice.forecast.store import ForecastStore

# randrange bounds: low inclusive, high exclusive
MIN_TEMPERATURE_C = -20
MAX_TEMPERATURE_C = 55


class SeedTask:
    """
    Idempotent seeder. Only the run that creates the store writes records;
    later runs log that the database exists and do nothing.
    Store errors propagate to the caller; startup should abort on them.
    """

    name = "seed"

    def __init__(
        self,
        store: ForecastStore,
        config: SeedConfig,
        rng: random.Random,
        today: Callable[[], date] = date.today,
    ):
        self.store = store
        self.config = config
        self.rng = rng
        self.today = today
        self.logger = logging.getLogger(self.__class__.__name__)

    def run(self) -> int:
        """Seed if the store was just created. Returns the number of records written."""
        if self.store.ensure_created():
            self.logger.info("Database created")
            return self._seed()

        if self.config.reseed_if_empty and self.store.count() == 0:
            # An earlier seed failed after the table was created
            self.logger.warning("Database exists but holds no forecasts; seeding again")
            return self._seed()

        self.logger.info("Database already exists")
        return 0

    def generate(self) -> List[Forecast]:
        """One forecast per day for the configured number of days, starting tomorrow."""
        start = self.today()
        return [
            Forecast(
                date=start + timedelta(days=offset),
                temperature_c=self.rng.randrange(MIN_TEMPERATURE_C, MAX_TEMPERATURE_C),
                summary=self.rng.choice(SUMMARIES),
            )
            for offset in range(1, self.config.days + 1)
        ]

    def _seed(self) -> int:
        forecasts = self.generate()
        self.store.add_range(forecasts)
        self.logger.info(f"Database seeded with {len(forecasts)} records")
        return len(forecasts)
