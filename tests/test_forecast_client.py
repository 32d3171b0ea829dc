"""Tests for ForecastClient decoding and failure classification."""

from datetime import date
from unittest.mock import MagicMock

import pytest
import requests

from weatherservice.client.forecast_client import ForecastClient
from weatherservice.core.config import AppConfig
from weatherservice.core.errors import RemoteDecodeError, RemoteUnavailableError

from .conftest import create_mock_response

THREE_FORECASTS = [
    {"date": "2024-03-11", "temperatureC": 12, "temperatureF": 53, "summary": "Cool"},
    {"date": "2024-03-12", "temperatureC": -4, "temperatureF": 25, "summary": "Bracing"},
    {"date": "2024-03-13T00:00:00", "temperatureC": 40, "temperatureF": 103, "summary": "Scorching"},
]


@pytest.fixture
def client(app_config: AppConfig, mock_session: MagicMock) -> ForecastClient:
    return ForecastClient(app_config.client, session=mock_session)


class TestGetForecast:

    def test_decodes_three_forecasts(self, client: ForecastClient, mock_session: MagicMock, caplog) -> None:
        mock_session.get.return_value = create_mock_response(json_data=THREE_FORECASTS)
        caplog.set_level("INFO")

        forecasts = client.get_forecast()

        assert len(forecasts) == 3
        assert [f.date for f in forecasts] == [date(2024, 3, 11), date(2024, 3, 12), date(2024, 3, 13)]
        assert [f.temperature_c for f in forecasts] == [12, -4, 40]
        assert [f.summary for f in forecasts] == ["Cool", "Bracing", "Scorching"]
        assert "Received 3 forecasts" in caplog.text

    def test_requests_well_known_path(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = create_mock_response(json_data=[])

        assert client.get_forecast() == []

        mock_session.get.assert_called_once()
        call_args = mock_session.get.call_args
        assert call_args.args[0] == "http://weather.test:8080/weatherforecast"
        assert call_args.kwargs["timeout"] == 2.0

    def test_derives_fahrenheit(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = create_mock_response(json_data=THREE_FORECASTS[:1])
        assert client.get_forecast()[0].temperature_f == 53


class TestUnavailable:

    def test_connection_error(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.side_effect = requests.exceptions.ConnectionError("Connection refused")
        with pytest.raises(RemoteUnavailableError):
            client.get_forecast()

    def test_timeout(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.side_effect = requests.exceptions.Timeout("read timed out")
        with pytest.raises(RemoteUnavailableError):
            client.get_forecast()

    def test_non_success_status(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = create_mock_response(status=503, json_data={"detail": "down"})
        with pytest.raises(RemoteUnavailableError) as exc_info:
            client.get_forecast()
        assert exc_info.value.status == 503

    def test_unreachable_endpoint_logs_no_count(self, client: ForecastClient, mock_session: MagicMock, caplog) -> None:
        mock_session.get.side_effect = requests.exceptions.ConnectionError("Name or service not known")
        caplog.set_level("INFO")
        with pytest.raises(RemoteUnavailableError):
            client.get_forecast()
        assert "Received" not in caplog.text


class TestDecodeErrors:

    def test_object_body(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = create_mock_response(json_data={"date": "2024-03-11"})
        with pytest.raises(RemoteDecodeError):
            client.get_forecast()

    def test_invalid_json(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = create_mock_response(json_error=ValueError("Expecting value"))
        with pytest.raises(RemoteDecodeError):
            client.get_forecast()

    def test_element_missing_temperature(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = create_mock_response(json_data=[{"date": "2024-03-11", "summary": "Mild"}])
        with pytest.raises(RemoteDecodeError):
            client.get_forecast()

    def test_element_with_bad_date(self, client: ForecastClient, mock_session: MagicMock) -> None:
        mock_session.get.return_value = create_mock_response(
            json_data=[{"date": "next tuesday", "temperatureC": 5, "summary": "Mild"}]
        )
        with pytest.raises(RemoteDecodeError):
            client.get_forecast()
