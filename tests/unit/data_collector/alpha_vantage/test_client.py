from unittest.mock import patch

import pytest

from yieldmap.data_collector.alpha_vantage.client import AlphaVantageClient
from yieldmap.data_collector.config import SnapshotConfig
from yieldmap.data_collector.errors import (
    ConfigurationError,
    NetworkError,
    RateLimitError,
    ValidationError,
)
from tests._fixtures import canned_api_factory


@pytest.fixture
def av_client(snapshot_config):
    """Return an AlphaVantageClient for tests."""
    return AlphaVantageClient(config=snapshot_config)


def test_fetch_normalizes_overview(av_client):
    """A valid overview becomes a record with percentage yield and translated sector"""
    resp = canned_api_factory("overview", DividendYield="0.05", Sector="ENERGY", Name="Exxon")
    with patch.object(av_client.http_client.session, "get", return_value=resp):
        record = av_client.fetch("AAPL")

    assert record.symbol == "AAPL"
    assert record.display_name == "Exxon"
    assert record.sector_label == "Energy"
    assert record.dividend_yield_percent == pytest.approx(5.0)


def test_fetch_sends_symbol_and_api_key(av_client):
    with patch.object(
        av_client.http_client.session, "get", return_value=canned_api_factory("overview")
    ) as mock_get:
        av_client.fetch("AAPL")

    params = mock_get.call_args.kwargs["params"]
    assert params == {"function": "OVERVIEW", "symbol": "AAPL", "apikey": "TEST"}


def test_fetch_without_api_key_is_configuration_error():
    """A missing credential fails before any HTTP call"""
    client = AlphaVantageClient(config=SnapshotConfig(API_KEY=""))
    with patch.object(client.http_client.session, "get") as mock_get:
        with pytest.raises(ConfigurationError):
            client.fetch("AAPL")

    mock_get.assert_not_called()


def test_fetch_error_message_is_invalid_symbol(av_client):
    with patch.object(
        av_client.http_client.session, "get", return_value=canned_api_factory("error_message")
    ):
        with pytest.raises(ValidationError, match="Invalid ticker symbol: ZZZZ"):
            av_client.fetch("ZZZZ")


def test_fetch_note_is_rate_limit_and_not_retried(av_client):
    with patch.object(
        av_client.http_client.session, "get", return_value=canned_api_factory("note")
    ) as mock_get:
        with pytest.raises(RateLimitError):
            av_client.fetch("AAPL")

    assert mock_get.call_count == 1


def test_fetch_empty_payload_is_no_data(av_client):
    with patch.object(
        av_client.http_client.session, "get", return_value=canned_api_factory("empty")
    ):
        with pytest.raises(ValidationError, match="No data found for ticker: AAPL"):
            av_client.fetch("AAPL")


def test_anomaly_precedence_error_before_note_before_missing_symbol():
    """Error payload wins over a note, and a note wins over a missing Symbol"""
    with pytest.raises(ValidationError, match="Invalid ticker"):
        AlphaVantageClient.to_record("X", {"Error Message": "bad", "Note": "slow down"})
    with pytest.raises(RateLimitError):
        AlphaVantageClient.to_record("X", {"Note": "slow down"})
    with pytest.raises(RateLimitError):
        AlphaVantageClient.to_record("X", {"Information": "daily limit"})


def test_to_record_defaults_name_sector_and_yield():
    record = AlphaVantageClient.to_record("XYZ", {"Symbol": "XYZ", "DividendYield": "None"})

    assert record.display_name == "XYZ"
    assert record.sector_label == "Unknown"
    assert record.dividend_yield_percent == 0.0


def test_fetch_server_errors_surface_as_network_error(av_client):
    with patch.object(
        av_client.http_client.session, "get", return_value=canned_api_factory("empty", status=503)
    ) as mock_get:
        with pytest.raises(NetworkError):
            av_client.fetch("AAPL")

    assert mock_get.call_count == av_client.config.MAX_RETRIES + 1


def test_fetch_non_object_body_is_network_error(av_client):
    resp = canned_api_factory("empty")
    resp._payload = ["not", "an", "object"]
    with patch.object(av_client.http_client.session, "get", return_value=resp) as mock_get:
        with pytest.raises(NetworkError):
            av_client.fetch("AAPL")

    assert mock_get.call_count == 1
