"""
Core module for Scan Ledger.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- ledger_client: Action-tagged client for the Remote Ledger Service (server side)
- proxy_client: HTTP client for the proxy API (client side)
"""

from .exceptions import (
    ScanLedgerError,
    ConfigurationError,
    LedgerError,
    LedgerUnavailableError,
    LedgerResponseError,
    InvalidScanContextError,
    CameraUnavailableError,
    PermissionDeniedError,
)
from .ledger_client import LedgerClient
from .proxy_client import ProxyAPIClient

__all__ = [
    "ScanLedgerError",
    "ConfigurationError",
    "LedgerError",
    "LedgerUnavailableError",
    "LedgerResponseError",
    "InvalidScanContextError",
    "CameraUnavailableError",
    "PermissionDeniedError",
    "LedgerClient",
    "ProxyAPIClient",
]
