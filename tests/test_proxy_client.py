"""
Unit tests for the proxy API client.

Every outcome, including transport failures, comes back as an ApiResponse.
"""

import pytest
from unittest.mock import MagicMock

import requests

from core.proxy_client import ProxyAPIClient


# Fixtures

@pytest.fixture
def session():
    mock_session = MagicMock()
    response = MagicMock()
    response.status_code = 200
    response.json.return_value = {"success": True, "data": []}
    mock_session.request.return_value = response
    return mock_session


@pytest.fixture
def api(session):
    return ProxyAPIClient("http://station-proxy:5000/", timeout_seconds=10, session=session)


# Tests for ProxyAPIClient

class TestProxyAPIClient:
    """Requests go to the right endpoint; failures never raise."""

    def test_base_url_trailing_slash_removed(self, api):
        assert api.base_url == "http://station-proxy:5000"

    def test_add_scan_posts_json(self, api, session):
        scan = {"serialNumber": "OLV-001-0001", "scanEvent": "SALE_B2C", "location": "Marche"}
        session.request.return_value.json.return_value = {"success": True, "data": scan}

        response = api.add_scan(scan)

        assert response.data == scan
        session.request.assert_called_once_with(
            "POST", "http://station-proxy:5000/api/scans", json=scan, timeout=10.0
        )

    @pytest.mark.parametrize("method, verb, path", [
        ("get_logs", "GET", "/api/logs"),
        ("clear_logs", "POST", "/api/logs/clear"),
        ("get_summary", "GET", "/api/summary"),
        ("get_products", "GET", "/api/products"),
        ("get_users", "GET", "/api/users"),
        ("get_b2b_clients", "GET", "/api/b2b-clients"),
        ("get_cake_status", "GET", "/api/cake-status"),
        ("get_live_operations", "GET", "/api/live-operations"),
    ])
    def test_endpoints(self, api, session, method, verb, path):
        getattr(api, method)()
        args = session.request.call_args.args
        assert args == (verb, "http://station-proxy:5000" + path)

    def test_delete_product_quotes_id(self, api, session):
        api.delete_product("CAKE 1/2")
        assert session.request.call_args.args[1].endswith("/api/products/CAKE%201%2F2")

    def test_timeout_becomes_failure(self, api, session):
        session.request.side_effect = requests.Timeout()

        response = api.get_logs()

        assert response.success is False
        assert "timed out" in response.error

    def test_network_error_becomes_failure(self, api, session):
        session.request.side_effect = requests.ConnectionError("refused")

        response = api.get_logs()

        assert response.success is False
        assert response.error.startswith("Network error")

    def test_error_status_with_envelope(self, api, session):
        session.request.return_value.status_code = 400
        session.request.return_value.json.return_value = {
            "success": False, "error": "Serial number, scan event, and location are required",
        }

        response = api.add_scan({})

        assert response.success is False
        assert response.error == "Serial number, scan event, and location are required"

    def test_error_status_without_envelope(self, api, session):
        session.request.return_value.status_code = 502
        session.request.return_value.json.side_effect = ValueError("not json")

        response = api.get_summary()

        assert response.error == "HTTP 502"

    def test_malformed_success_body(self, api, session):
        session.request.return_value.json.return_value = {"rows": []}

        response = api.get_products()

        assert response.success is False
        assert response.error.startswith("Malformed response")
