"""
Tests for the proxy API routes.

The Flask app is built with a mock ledger client, so every test checks
what the handler forwards and how it wraps the ledger's answer.
"""

import pytest
from unittest.mock import MagicMock

from app import create_app
from config import TestingConfig
from core.exceptions import ConfigurationError, LedgerResponseError, LedgerUnavailableError
from models.envelope import ApiResponse


class UnconfiguredConfig(TestingConfig):
    LEDGER_URL = ""


# Fixtures

@pytest.fixture
def ledger():
    mock_ledger = MagicMock()
    mock_ledger.timeout_seconds = 5.0
    return mock_ledger


@pytest.fixture
def app(ledger):
    return create_app("config.TestingConfig", ledger_client=ledger)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def scan():
    return {
        "serialNumber": "OLV-001-0001",
        "scanEvent": "BOUTIQUE_STOCK_SCAN",
        "location": "Nice-Boutique",
        "timestamp": "2026-05-01T10:00:00+00:00",
    }


# Tests for app startup

class TestAppFactory:
    """The app refuses to start without ledger configuration."""

    def test_missing_ledger_config_fails_fast(self):
        with pytest.raises(ConfigurationError):
            create_app(UnconfiguredConfig)

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.get_json()
        assert body["checks"]["ledger"] == "configured"
        assert body["environment"] == "testing"

    def test_unknown_route_gets_envelope(self, client):
        response = client.get("/api/nope")

        assert response.status_code == 404
        assert response.get_json()["success"] is False


# Tests for scan routes

class TestScanRoutes:
    """POST /api/scans and the log endpoints."""

    def test_add_scan_forwards(self, client, ledger, scan):
        ledger.add_scan.return_value = ApiResponse.ok(scan)

        response = client.post("/api/scans", json=scan)

        assert response.status_code == 200
        assert response.get_json() == {"success": True, "data": scan}
        ledger.add_scan.assert_called_once_with(scan)

    @pytest.mark.parametrize("missing", ["serialNumber", "scanEvent", "location"])
    def test_missing_field_is_rejected(self, client, ledger, scan, missing):
        del scan[missing]

        response = client.post("/api/scans", json=scan)

        assert response.status_code == 400
        assert response.get_json() == {
            "success": False,
            "error": "Serial number, scan event, and location are required",
        }
        ledger.add_scan.assert_not_called()

    def test_non_object_body_is_rejected(self, client, ledger):
        response = client.post("/api/scans", data="OLV-001-0001", content_type="text/plain")

        assert response.status_code == 400
        ledger.add_scan.assert_not_called()

    def test_b2b_without_client_is_still_forwarded(self, client, ledger, scan):
        scan["scanEvent"] = "DELIVERY_B2B"
        ledger.add_scan.return_value = ApiResponse.ok(scan)

        response = client.post("/api/scans", json=scan)

        assert response.status_code == 200
        assert "clientId" not in ledger.add_scan.call_args.args[0]

    def test_client_id_forwarded(self, client, ledger, scan):
        scan["scanEvent"] = "DELIVERY_B2B"
        scan["clientId"] = "C-100"
        ledger.add_scan.return_value = ApiResponse.ok(scan)

        client.post("/api/scans", json=scan)

        assert ledger.add_scan.call_args.args[0]["clientId"] == "C-100"

    def test_location_markup_stripped(self, client, ledger, scan):
        scan["location"] = "<b>Nice-Boutique</b>"
        ledger.add_scan.return_value = ApiResponse.ok(scan)

        client.post("/api/scans", json=scan)

        assert ledger.add_scan.call_args.args[0]["location"] == "Nice-Boutique"

    def test_ampersands_forwarded_unchanged(self, client, ledger, scan):
        scan["scanEvent"] = "DELIVERY_B2B"
        scan["location"] = "Boulangerie & Co"
        scan["clientId"] = "C&A-100"
        ledger.add_scan.return_value = ApiResponse.ok(scan)

        client.post("/api/scans", json=scan)

        forwarded = ledger.add_scan.call_args.args[0]
        assert forwarded["location"] == "Boulangerie & Co"
        assert forwarded["clientId"] == "C&A-100"

    def test_ledger_unavailable_is_502(self, client, ledger, scan):
        ledger.add_scan.side_effect = LedgerUnavailableError("timed out after 5s", "addScan")

        response = client.post("/api/scans", json=scan)

        assert response.status_code == 502
        body = response.get_json()
        assert body["success"] is False
        assert "timed out" in body["error"]

    def test_ledger_reported_failure_passes_through(self, client, ledger, scan):
        ledger.add_scan.return_value = ApiResponse.failure("Invalid scan event")

        response = client.post("/api/scans", json=scan)

        assert response.status_code == 200
        assert response.get_json() == {"success": False, "error": "Invalid scan event"}

    def test_get_logs(self, client, ledger, scan):
        ledger.get_logs.return_value = ApiResponse.ok([scan])

        response = client.get("/api/logs")

        assert response.get_json()["data"] == [scan]

    def test_clear_logs(self, client, ledger):
        ledger.clear_logs.return_value = ApiResponse.ok()

        response = client.post("/api/logs/clear")

        assert response.get_json() == {"success": True}
        ledger.clear_logs.assert_called_once()

    def test_summary_malformed_ledger_body_is_502(self, client, ledger):
        ledger.get_summary.side_effect = LedgerResponseError("not an envelope", "getSummary")

        response = client.get("/api/summary")

        assert response.status_code == 502


# Tests for catalog routes

class TestCatalogRoutes:
    """Products, users and B2B clients."""

    def test_add_product_requires_id_and_name(self, client, ledger):
        response = client.post("/api/products", json={"id": "OLV-001"})

        assert response.status_code == 400
        assert response.get_json()["error"] == "Product ID and name are required"
        ledger.add_product.assert_not_called()

    def test_add_product_returns_catalog(self, client, ledger):
        catalog = [{"id": "OLV-001", "name": "Olive Cake"}]
        ledger.add_product.return_value = ApiResponse.ok(catalog)

        response = client.post("/api/products", json={"id": "OLV-001", "name": "<i>Olive Cake</i>"})

        assert response.get_json()["data"] == catalog
        assert ledger.add_product.call_args.args[0]["name"] == "Olive Cake"

    def test_product_name_with_symbols_unchanged(self, client, ledger):
        ledger.add_product.return_value = ApiResponse.ok([])

        client.post("/api/products", json={"id": "TRT-006", "name": "Tarte < 6 parts & citron"})

        assert ledger.add_product.call_args.args[0]["name"] == "Tarte < 6 parts & citron"

    def test_delete_product(self, client, ledger):
        ledger.delete_product.return_value = ApiResponse.ok([])

        response = client.delete("/api/products/OLV-001")

        assert response.status_code == 200
        ledger.delete_product.assert_called_once_with("OLV-001")

    def test_users_have_no_passwords(self, client, ledger):
        ledger.get_users.return_value = ApiResponse.ok([
            {"email": "a@example.com", "name": "A", "role": "Scanner", "password": "hunter2"},
        ])

        response = client.get("/api/users")

        users = response.get_json()["data"]
        assert users == [{"email": "a@example.com", "name": "A", "role": "Scanner"}]

    def test_b2b_clients(self, client, ledger):
        ledger.get_b2b_clients.return_value = ApiResponse.ok([{"clientId": "C-100", "clientName": "Hotel"}])

        response = client.get("/api/b2b-clients")

        assert response.get_json()["data"][0]["clientId"] == "C-100"


# Tests for dashboard routes

class TestDashboardRoutes:
    """Dashboards are relayed unchanged."""

    def test_cake_status(self, client, ledger):
        items = [{"serialNumber": "OLV-001-0001", "currentLocation": "Boutique",
                  "status": "In Stock", "lastUpdate": "2026-05-01T10:00:00Z"}]
        ledger.get_cake_status.return_value = ApiResponse.ok(items)

        assert client.get("/api/cake-status").get_json()["data"] == items

    def test_live_operations(self, client, ledger):
        data = {"productionSummary": {"producedToday": 3, "totalProduced": 40}}
        ledger.get_live_operations.return_value = ApiResponse.ok(data)

        assert client.get("/api/live-operations").get_json()["data"] == data
