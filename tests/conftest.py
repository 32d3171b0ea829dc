"""Pytest configuration and fixtures for weatherservice tests."""

import logging
import random
from datetime import date
from typing import Any, Iterator, Optional
from unittest.mock import MagicMock

import pytest
import requests

from weatherservice.core.config import AppConfig, SeedConfig, config_from_dict
from weatherservice.core.db import Database
from weatherservice.forecast.seeder import SeedTask
from weatherservice.forecast.store import ForecastStore

TODAY = date(2024, 3, 10)


@pytest.fixture
def database(tmp_path) -> Iterator[Database]:
    """File-backed SQLite database, fresh per test."""
    db = Database(f"sqlite:///{tmp_path / 'weather.db'}")
    yield db
    db.dispose()


@pytest.fixture
def store(database: Database) -> ForecastStore:
    return ForecastStore(database)


@pytest.fixture
def seeder(store: ForecastStore) -> SeedTask:
    return SeedTask(store, SeedConfig(), random.Random(1234), today=lambda: TODAY)


@pytest.fixture
def seeded_store(store: ForecastStore, seeder: SeedTask) -> ForecastStore:
    seeder.run()
    return store


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return config_from_dict({
        "location": "Seattle",
        "database": {"url": f"sqlite:///{tmp_path / 'app.db'}"},
        "client": {"base_url": "http://weather.test:8080/", "timeout": 2},
        "logging": {"level": "DEBUG"},
    })


@pytest.fixture
def restore_root_logging() -> Iterator[None]:
    """Undo handler changes made by setup_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock requests Session."""
    return MagicMock(spec=requests.Session)


def create_mock_response(
    status: int = 200,
    json_data: Optional[Any] = None,
    json_error: Optional[Exception] = None,
) -> MagicMock:
    """Create a configured mock requests Response.

    Args:
        status: HTTP status code
        json_data: Data to return from json() call
        json_error: Exception raised by json() instead of returning data
    """
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response
