"""Error types for the weather service, its store, and its client."""

from typing import Optional


class WeatherServiceError(Exception):
    """Base error for weather service failures."""


class ConfigError(WeatherServiceError):
    """Configuration file is missing required values or holds invalid ones."""


class StorageError(WeatherServiceError):
    """Backend failure in the forecast store."""


class StorageWriteError(StorageError):
    """Creating storage or inserting records failed."""


class StorageReadError(StorageError):
    """Reading records from the store failed."""


class RemoteError(WeatherServiceError):
    """Base error for calls to a remote forecast service."""


class RemoteUnavailableError(RemoteError):
    """Remote service could not be reached or answered with a non-success status."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class RemoteDecodeError(RemoteError):
    """Response body did not decode as a list of forecasts."""
