"""
Forecast store: create-if-absent, bulk insert, and full read over the weather_forecasts table.
"""
import logging
from typing import Iterable, List

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from weatherservice.core.db import Database
from weatherservice.core.errors import StorageReadError, StorageWriteError
from weatherservice.forecast.models import Forecast, WeatherForecastRecord


class ForecastStore:
    """Owns forecast storage. The seeder and service only hold a reference to it."""

    def __init__(self, database: Database):
        self.database = database
        self.table = WeatherForecastRecord.__table__
        self.logger = logging.getLogger(self.__class__.__name__)

    def ensure_created(self) -> bool:
        """Create the forecasts table if absent. True only when this call created it."""
        try:
            if self.database.has_table(self.table.name):
                self.logger.debug(f"Table {self.table.name} already exists")
                return False
            self.table.create(self.database.engine, checkfirst=True)
        except SQLAlchemyError as e:
            raise StorageWriteError(f"Could not create table {self.table.name}: {e}") from e
        self.logger.info(f"Created table {self.table.name}")
        return True

    def add_range(self, forecasts: Iterable[Forecast]) -> None:
        """Insert all forecasts in one transaction; nothing is written if any insert fails."""
        rows = [WeatherForecastRecord.from_forecast(f) for f in forecasts]
        if not rows:
            return
        try:
            with self.database.session_scope() as session:
                session.add_all(rows)
        except SQLAlchemyError as e:
            raise StorageWriteError(f"Failed to write {len(rows)} forecasts: {e}") from e
        self.logger.debug(f"Wrote {len(rows)} forecasts")

    def get_all(self) -> List[Forecast]:
        """Return every stored forecast; empty list when the store is empty."""
        try:
            with self.database.session_scope() as session:
                rows = session.execute(select(WeatherForecastRecord)).scalars().all()
                return [row.to_forecast() for row in rows]
        except SQLAlchemyError as e:
            raise StorageReadError(f"Failed to read forecasts: {e}") from e

    def count(self) -> int:
        try:
            with self.database.session_scope() as session:
                return session.execute(
                    select(func.count()).select_from(WeatherForecastRecord)
                ).scalar_one()
        except SQLAlchemyError as e:
            raise StorageReadError(f"Failed to count forecasts: {e}") from e
