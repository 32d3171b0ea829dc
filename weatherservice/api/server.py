"""
FastAPI server for the weather service. Routes read through a ForecastService
built by the entry point:

- GET /weatherforecast: all stored forecasts
- GET /weatherforecast/location: configured location
"""
import logging
from typing import List

from fastapi import APIRouter, FastAPI, HTTPException

from weatherservice.core.config import ApiConfig
from weatherservice.core.errors import StorageReadError
from weatherservice.forecast.models import Forecast
from weatherservice.forecast.service import ForecastService

logger = logging.getLogger(__name__)


def get_router(service: ForecastService) -> APIRouter:
    """Return the forecast router; mounted with prefix /weatherforecast."""
    router = APIRouter(tags=["WeatherForecast"])

    @router.get("", response_model=List[Forecast])
    def get_forecasts() -> List[Forecast]:
        """Return every stored forecast."""
        try:
            return service.get_forecasts()
        except StorageReadError as e:
            logger.error(f"Forecast read failed: {e}")
            raise HTTPException(status_code=503, detail="Forecast store unavailable")

    @router.get("/location", response_model=str)
    def get_location() -> str:
        """Return the configured location."""
        return service.get_location()

    return router


def create_app(service: ForecastService) -> FastAPI:
    """Create FastAPI app with routes that use the given ForecastService instance."""
    app = FastAPI(title="WeatherService", description="Stored weather forecasts")
    app.include_router(get_router(service), prefix="/weatherforecast")
    return app


def run_api_server(app: FastAPI, api_config: ApiConfig) -> None:
    """Serve the app with uvicorn on api.host / api.port. Blocks until shutdown."""
    import uvicorn

    logger.info(f"API server listening at http://{api_config.host}:{api_config.port}")
    uvicorn.run(app, host=api_config.host, port=api_config.port, log_config=None)
