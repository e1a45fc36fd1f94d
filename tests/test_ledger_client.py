"""
Unit tests for the Remote Ledger Service client.

The requests session is mocked; no network access.
"""

import logging
import pytest
from unittest.mock import MagicMock

import requests

from core.exceptions import ConfigurationError, LedgerResponseError, LedgerUnavailableError
from core.ledger_client import LedgerClient


LEDGER_URL = "https://ledger.example.test/exec"


# Fixtures

@pytest.fixture
def session():
    """Mock session whose POST returns a successful envelope."""
    mock_session = MagicMock()
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {"success": True, "data": []}
    mock_session.post.return_value = response
    return mock_session


@pytest.fixture
def client(session):
    return LedgerClient(
        LEDGER_URL, "secret-key", timeout_seconds=5,
        session=session, logger=logging.getLogger("test"),
    )


def sent_body(session):
    return session.post.call_args.kwargs["json"]


# Tests for construction

class TestLedgerClientConfig:
    """Missing configuration fails at construction time."""

    def test_missing_url(self, session):
        with pytest.raises(ConfigurationError) as exc_info:
            LedgerClient("", "secret-key", session=session)
        assert exc_info.value.setting == "LEDGER_URL"

    def test_missing_key(self, session):
        with pytest.raises(ConfigurationError) as exc_info:
            LedgerClient(LEDGER_URL, "", session=session)
        assert exc_info.value.setting == "LEDGER_API_KEY"

    def test_timeout_exposed(self, client):
        assert client.timeout_seconds == 5.0


# Tests for the wire protocol

class TestLedgerProtocol:
    """Action-tagged POSTs with the bearer credential."""

    def test_request_shape(self, client, session):
        scan = {"serialNumber": "OLV-001-0001", "scanEvent": "PRODUCTION_SCAN", "location": "Warehouse"}
        session.post.return_value.json.return_value = {"success": True, "data": scan}

        response = client.add_scan(scan)

        assert response.success is True
        assert response.data == scan
        args, kwargs = session.post.call_args
        assert args == (LEDGER_URL,)
        assert kwargs["headers"]["Authorization"] == "Bearer secret-key"
        assert kwargs["timeout"] == 5.0
        assert kwargs["json"] == {"action": "addScan", "payload": scan}

    def test_action_without_payload(self, client, session):
        client.get_logs()
        assert sent_body(session) == {"action": "getLogs"}

    @pytest.mark.parametrize("method, action", [
        ("clear_logs", "clearLogs"),
        ("get_summary", "getSummary"),
        ("get_products", "getProducts"),
        ("get_users", "getUsers"),
        ("get_b2b_clients", "getB2BClients"),
        ("get_cake_status", "getCakeStatus"),
        ("get_live_operations", "getLiveOperationsData"),
    ])
    def test_action_tags(self, client, session, method, action):
        getattr(client, method)()
        assert sent_body(session)["action"] == action

    def test_delete_product_payload(self, client, session):
        client.delete_product("OLV-001")
        assert sent_body(session) == {"action": "deleteProduct", "payload": {"id": "OLV-001"}}

    def test_ledger_reported_failure_is_returned(self, client, session):
        session.post.return_value.json.return_value = {"success": False, "error": "Invalid action"}

        response = client.call("bogus")

        assert response.success is False
        assert response.error == "Invalid action"


# Tests for error mapping

class TestLedgerErrors:
    """Transport problems raise; nothing is retried."""

    def test_timeout(self, client, session):
        session.post.side_effect = requests.Timeout("read timed out")

        with pytest.raises(LedgerUnavailableError) as exc_info:
            client.get_logs()

        assert exc_info.value.action == "getLogs"
        assert session.post.call_count == 1

    def test_connection_error(self, client, session):
        session.post.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(LedgerUnavailableError):
            client.get_products()

    def test_http_error_status(self, client, session):
        session.post.return_value.status_code = 500

        with pytest.raises(LedgerUnavailableError) as exc_info:
            client.get_summary()

        assert exc_info.value.status_code == 500

    def test_non_json_body(self, client, session):
        session.post.return_value.json.side_effect = ValueError("Expecting value")

        with pytest.raises(LedgerResponseError):
            client.get_logs()

    def test_body_without_envelope(self, client, session):
        session.post.return_value.json.return_value = [{"serialNumber": "OLV-001-0001"}]

        with pytest.raises(LedgerResponseError):
            client.get_logs()
