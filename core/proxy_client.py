"""
HTTP client for the Scan Ledger proxy API.

Used on the client side (scan stations, the inventory store) to reach the
``/api/*`` endpoints. Unlike LedgerClient, this client never raises for
transport problems: every call returns an ApiResponse, with network
failures, timeouts, HTTP errors and unreadable bodies normalized to
``ApiResponse(success=False, error=...)``.

Usage:
    api = ProxyAPIClient("http://127.0.0.1:5000")
    response = api.get_logs()
    if not response.success:
        print(response.error)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from models.envelope import ApiResponse


class ProxyAPIClient:
    """Thin requests wrapper over the proxy endpoints."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        self._base_url = (base_url or "").rstrip("/")
        self._timeout = max(1.0, float(timeout_seconds))
        self._session = session or requests.Session()
        self._logger = logger or logging.getLogger("scan_ledger.core.proxy_client")

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(
        self,
        method: str,
        path: str,
        json_body: Optional[Dict[str, Any]] = None
    ) -> ApiResponse:
        url = f"{self._base_url}{path}"
        try:
            resp = self._session.request(method, url, json=json_body, timeout=self._timeout)
        except requests.Timeout:
            self._logger.error(f"{method} {path} timed out after {self._timeout:.0f}s")
            return ApiResponse.failure(f"Request timed out after {self._timeout:.0f}s")
        except requests.RequestException as e:
            self._logger.error(f"{method} {path} failed: {e}")
            return ApiResponse.failure(f"Network error: {e}")

        # Error statuses still carry an envelope (400 validation, 502 ledger down)
        try:
            return ApiResponse.from_json(resp.json())
        except ValueError as e:
            self._logger.error(f"{method} {path} returned HTTP {resp.status_code} with unreadable body: {e}")
            if not 200 <= resp.status_code < 300:
                return ApiResponse.failure(f"HTTP {resp.status_code}")
            return ApiResponse.failure(f"Malformed response: {e}")

    # Scan log
    def add_scan(self, scan: Dict[str, Any]) -> ApiResponse:
        return self._request("POST", "/api/scans", scan)

    def get_logs(self) -> ApiResponse:
        return self._request("GET", "/api/logs")

    def clear_logs(self) -> ApiResponse:
        return self._request("POST", "/api/logs/clear")

    def get_summary(self) -> ApiResponse:
        return self._request("GET", "/api/summary")

    # Catalog & directories
    def get_products(self) -> ApiResponse:
        return self._request("GET", "/api/products")

    def add_product(self, product: Dict[str, Any]) -> ApiResponse:
        return self._request("POST", "/api/products", product)

    def delete_product(self, product_id: str) -> ApiResponse:
        return self._request("DELETE", f"/api/products/{quote(product_id, safe='')}")

    def get_users(self) -> ApiResponse:
        return self._request("GET", "/api/users")

    def get_b2b_clients(self) -> ApiResponse:
        return self._request("GET", "/api/b2b-clients")

    # Dashboards
    def get_cake_status(self) -> ApiResponse:
        return self._request("GET", "/api/cake-status")

    def get_live_operations(self) -> ApiResponse:
        return self._request("GET", "/api/live-operations")
