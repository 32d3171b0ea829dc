"""
Forecast record types.

- WeatherForecastRecord: SQLAlchemy row, one per stored forecast.
- Forecast: immutable pydantic value used by the store, service, API and client.
  Wire names are date / temperatureC / temperatureF / summary.
"""
import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from sqlalchemy import Column, Date, Integer, String

from weatherservice.core.db import Base

SUMMARIES = (
    "Freezing", "Bracing", "Chilly", "Cool", "Mild",
    "Warm", "Balmy", "Hot", "Sweltering", "Scorching",
)


def celsius_to_fahrenheit(temperature_c: int) -> int:
    return 32 + int(temperature_c / 0.5556)


class WeatherForecastRecord(Base):
    """One stored forecast. Rows are written once by the seeder and never updated."""
    __tablename__ = "weather_forecasts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False)
    temperature_c = Column(Integer, nullable=False)
    summary = Column(String(64), nullable=True)

    def to_forecast(self) -> "Forecast":
        return Forecast(date=self.date, temperature_c=self.temperature_c, summary=self.summary)

    @classmethod
    def from_forecast(cls, forecast: "Forecast") -> "WeatherForecastRecord":
        return cls(date=forecast.date, temperature_c=forecast.temperature_c, summary=forecast.summary)


class Forecast(BaseModel):
    """One date/temperature/summary tuple. temperature_f is derived on read, never stored."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    date: datetime.date
    temperature_c: int = Field(alias="temperatureC")
    summary: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def _drop_time_of_day(cls, value: Any) -> Any:
        """Accept timestamps from services that send a datetime; keep the calendar date."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, str) and len(value) > 10 and value[10] in "T ":
            return value[:10]
        return value

    @computed_field(alias="temperatureF")
    @property
    def temperature_f(self) -> int:
        return celsius_to_fahrenheit(self.temperature_c)
