"""
Remote Ledger Service client.

The ledger is a spreadsheet-backed script endpoint. It owns durable storage
of scan logs, the product catalog, the user and B2B client directories, and
every derived view (summary, cake status, live operations). This client is
the only code that talks to it.

PROTOCOL:
    POST <LEDGER_URL>
    Authorization: Bearer <LEDGER_API_KEY>
    {"action": "addScan", "payload": {...}}

    -> {"success": true, "data": ...}
    -> {"success": false, "error": "..."}

ERROR HANDLING:
    - Network failure, timeout, non-2xx      -> LedgerUnavailableError
    - Body not JSON / not an envelope        -> LedgerResponseError
    - Ledger-reported failure                -> ApiResponse(success=False)
    Nothing is retried. The credential never leaves the server.

Usage:
    client = LedgerClient(url, api_key, timeout_seconds=30)
    response = client.add_scan({"serialNumber": "OLV-001-0001", ...})
    if response.success:
        entry = response.data
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from models.envelope import ApiResponse
from .exceptions import ConfigurationError, LedgerResponseError, LedgerUnavailableError


class LedgerClient:
    """
    Action-tagged client for the Remote Ledger Service.

    One instance is created at app startup and shared by all request
    handlers. The underlying ``requests.Session`` keeps connections alive;
    the client itself holds no state between calls.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the ledger client.

        Args:
            url: Deployed script URL
            api_key: Bearer credential
            timeout_seconds: Per-request timeout
            session: Optional requests session (tests pass a mock)
            logger: Logger instance (creates default if not provided)

        Raises:
            ConfigurationError: If url or api_key is empty
        """
        if not url:
            raise ConfigurationError("LEDGER_URL")
        if not api_key:
            raise ConfigurationError("LEDGER_API_KEY")

        self._url = url
        self._api_key = api_key
        self._timeout = max(1.0, float(timeout_seconds))
        self._session = session or requests.Session()
        self._logger = logger or logging.getLogger("scan_ledger.core.ledger_client")

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def call(self, action: str, payload: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """
        Send one action to the ledger.

        Args:
            action: Action tag, e.g. "getLogs"
            payload: Optional action arguments

        Returns:
            The ledger's envelope (may be a ledger-reported failure)

        Raises:
            LedgerUnavailableError: On network failure, timeout or non-2xx status
            LedgerResponseError: If the body is not a JSON envelope
        """
        body: Dict[str, Any] = {"action": action}
        if payload is not None:
            body["payload"] = payload

        self._logger.debug(f"Ledger call: {action}")

        try:
            resp = self._session.post(
                self._url,
                headers=self._headers(),
                json=body,
                timeout=self._timeout,
            )
        except requests.Timeout:
            self._logger.error(f"Ledger {action} timed out after {self._timeout:.0f}s")
            raise LedgerUnavailableError(f"timed out after {self._timeout:.0f}s", action)
        except requests.RequestException as e:
            self._logger.error(f"Ledger {action} failed: {e}")
            raise LedgerUnavailableError(str(e), action)

        if not 200 <= resp.status_code < 300:
            self._logger.warning(f"Ledger {action} rejected: HTTP {resp.status_code}")
            raise LedgerUnavailableError(
                f"HTTP {resp.status_code}", action, status_code=resp.status_code
            )

        try:
            response = ApiResponse.from_json(resp.json())
        except ValueError as e:
            # requests raises a ValueError subclass for non-JSON bodies
            self._logger.error(f"Ledger {action} returned an unreadable body: {e}")
            raise LedgerResponseError(str(e), action)

        if not response.success:
            self._logger.warning(f"Ledger {action} reported failure: {response.error}")

        return response

    # =========================================================================
    # SCAN LOG
    # =========================================================================

    def add_scan(self, scan: Dict[str, Any]) -> ApiResponse:
        """Append a scan; data is the stored entry."""
        return self.call("addScan", scan)

    def get_logs(self) -> ApiResponse:
        return self.call("getLogs")

    def clear_logs(self) -> ApiResponse:
        return self.call("clearLogs")

    def get_summary(self) -> ApiResponse:
        return self.call("getSummary")

    # =========================================================================
    # CATALOG & DIRECTORIES
    # =========================================================================

    def get_products(self) -> ApiResponse:
        return self.call("getProducts")

    def add_product(self, product: Dict[str, Any]) -> ApiResponse:
        """Create or update a product; data is the full post-mutation catalog."""
        return self.call("addProduct", product)

    def delete_product(self, product_id: str) -> ApiResponse:
        """Remove a product; data is the full post-mutation catalog."""
        return self.call("deleteProduct", {"id": product_id})

    def get_users(self) -> ApiResponse:
        return self.call("getUsers")

    def get_b2b_clients(self) -> ApiResponse:
        return self.call("getB2BClients")

    # =========================================================================
    # DASHBOARDS
    # =========================================================================

    def get_cake_status(self) -> ApiResponse:
        return self.call("getCakeStatus")

    def get_live_operations(self) -> ApiResponse:
        return self.call("getLiveOperationsData")
