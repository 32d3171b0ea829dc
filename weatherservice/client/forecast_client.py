"""
HTTP client for a remote weather service.
Fetches /weatherforecast and decodes the body into Forecast values.
"""
import logging
from typing import List, Optional

import requests
from pydantic import TypeAdapter, ValidationError

from weatherservice.core.config import ClientConfig
from weatherservice.core.errors import RemoteDecodeError, RemoteUnavailableError
from weatherservice.forecast.models import Forecast

FORECAST_PATH = "/weatherforecast"

_forecast_list = TypeAdapter(List[Forecast])


class ForecastClient:
    """
    Calls the weather service and logs how many forecasts it received.
    No retries; pass a Session with mounted adapters for retry or auth policy.
    """

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = config.base_url.rstrip("/")
        self.timeout = config.timeout
        self.session = session or requests.Session()
        self.logger = logger or logging.getLogger(__name__)

    def get_forecast(self) -> List[Forecast]:
        url = f"{self.base_url}{FORECAST_PATH}"
        self.logger.debug(f"Fetching forecasts from: {url}")
        try:
            response = self.session.get(url, headers={"Accept": "application/json"}, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise RemoteUnavailableError(f"Could not reach {url}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise RemoteUnavailableError(
                f"{url} answered with status {response.status_code}",
                status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteDecodeError(f"Response from {url} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise RemoteDecodeError(f"Expected a JSON array from {url}, got {type(data).__name__}")
        try:
            forecasts = _forecast_list.validate_python(data)
        except ValidationError as e:
            raise RemoteDecodeError(f"Malformed forecast in response from {url}: {e}") from e

        self.logger.info(f"Received {len(forecasts)} forecasts")
        return forecasts

    def close(self) -> None:
        self.session.close()
