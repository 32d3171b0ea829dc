from .forecast_client import ForecastClient

__all__ = ["ForecastClient"]
