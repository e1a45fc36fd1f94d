"""
Custom exceptions for Scan Ledger.

Exception Hierarchy:
    ScanLedgerError (base)
    ├── ConfigurationError       - Missing ledger URL/credential (startup failure)
    ├── LedgerError              - Remote Ledger Service call failed (runtime, graceful)
    │   ├── LedgerUnavailableError - Network failure, timeout, non-2xx
    │   └── LedgerResponseError    - Body is not JSON or not an envelope
    ├── InvalidScanContextError  - Scan context incomplete (start blocked)
    ├── CameraUnavailableError   - Camera could not be acquired (permission denied)
    └── PermissionDeniedError    - User role not allowed to perform an operation

Usage:
    Startup errors (ConfigurationError) cause the app to fail fast.
    Everything else is caught at the proxy/client boundary and turned into
    a {success: false, error} envelope or a session state.
"""

from typing import Optional, Dict, Any, List


class ScanLedgerError(Exception):
    """
    Base exception for all Scan Ledger errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# STARTUP ERRORS - Application will not start if these occur
# =============================================================================

class ConfigurationError(ScanLedgerError):
    """
    A required setting is missing.

    The proxy cannot reach the Remote Ledger Service without LEDGER_URL
    and LEDGER_API_KEY.
    """

    def __init__(self, setting: str):
        message = f"Required setting {setting} is not configured"
        details = {
            "setting": setting,
            "resolution": f"Set {setting} in the environment or .env file"
        }
        super().__init__(message, details)
        self.setting = setting


# =============================================================================
# RUNTIME ERRORS - Application continues, but operation fails gracefully
# =============================================================================

class LedgerError(ScanLedgerError):
    """
    Base class for Remote Ledger Service transport failures.

    Carries the action tag that was being called so log lines and
    error envelopes can say what failed.
    """

    def __init__(
        self,
        message: str,
        action: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if action:
            error_details["action"] = action
        super().__init__(message, error_details)
        self.action = action


class LedgerUnavailableError(LedgerError):
    """
    The ledger could not be reached or answered with a non-2xx status.

    Covers connection errors, timeouts and HTTP error statuses.
    Never retried automatically.
    """

    def __init__(
        self,
        reason: str,
        action: Optional[str] = None,
        status_code: Optional[int] = None
    ):
        message = f"Remote ledger unavailable: {reason}"
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, action, details)
        self.reason = reason
        self.status_code = status_code


class LedgerResponseError(LedgerError):
    """The ledger answered, but not with a JSON success/data/error envelope."""

    def __init__(self, reason: str, action: Optional[str] = None):
        super().__init__(f"Malformed ledger response: {reason}", action)
        self.reason = reason


class InvalidScanContextError(ScanLedgerError):
    """
    A scan session was started without a complete scan context.

    The presentation layer should have kept the start action disabled;
    raising here keeps the invariant when it is bypassed.
    """

    def __init__(self, reasons: List[str]):
        message = "Scan context is incomplete: " + "; ".join(reasons)
        super().__init__(message, {"reasons": list(reasons)})
        self.reasons = list(reasons)


class CameraUnavailableError(ScanLedgerError):
    """
    The camera could not be acquired.

    Typical causes:
    - Camera permission denied
    - No video device at the configured index
    - Device already in use by another process
    """

    def __init__(self, device: Any, reason: str = "cannot open device"):
        message = f"Camera {device} unavailable: {reason}"
        details = {
            "device": device,
            "resolution": "Check camera permissions and CAMERA_DEVICE_ID, then retry"
        }
        super().__init__(message, details)
        self.device = device
        self.reason = reason


class PermissionDeniedError(ScanLedgerError):
    """The current user's role does not allow this operation."""

    def __init__(self, operation: str, role: Optional[str] = None):
        message = f"Role {role or 'anonymous'} is not allowed to {operation}"
        super().__init__(message, {"operation": operation, "role": role})
        self.operation = operation
        self.role = role
