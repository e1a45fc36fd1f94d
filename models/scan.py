"""
Scan data models.

These models describe a single physical scan and the context it is made in.
Used by the scan session controller (creates entries), the inventory store
(caches entries) and the proxy routes (forwards entries).

Thread Safety:
    - ScanContext and ScanLogEntry are frozen dataclasses (immutable)
    - Safe to hand from the camera thread to a submission thread
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, List, Optional


class ScanEvent(Enum):
    """
    Checkpoint a physical scan represents.

    Chosen per session by the operator; every entry logged during the
    session carries it.
    """

    PRODUCTION_SCAN = "PRODUCTION_SCAN"
    """Item came off the production line."""

    WAREHOUSE_ENTRY = "WAREHOUSE_ENTRY"
    """Item entered the production warehouse."""

    WAREHOUSE_EXIT = "WAREHOUSE_EXIT"
    """Item left the warehouse (in transit)."""

    BOUTIQUE_STOCK_SCAN = "BOUTIQUE_STOCK_SCAN"
    """Stock count at the boutique."""

    MARCHE_STOCK_SCAN = "MARCHE_STOCK_SCAN"
    """Stock count at the market stall."""

    SALEYA_STOCK_SCAN = "SALEYA_STOCK_SCAN"
    """Stock count at the open-air market."""

    SALE_B2C = "SALE_B2C"
    """Sold to a consumer."""

    DELIVERY_B2B = "DELIVERY_B2B"
    """Delivered to a business client. Requires a client id."""

    @property
    def requires_client(self) -> bool:
        """Whether scans of this kind must name a B2B client."""
        return self is ScanEvent.DELIVERY_B2B

    @classmethod
    def parse(cls, value: Any) -> "ScanEvent":
        """
        Convert a wire value to a ScanEvent.

        Raises:
            ValueError: If the value is not a known event kind
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown scan event: {value!r}")


class SessionState(Enum):
    """
    State of a scan session.

    Lifecycle:
        IDLE -> SCANNING -> (SUCCESS -> SCANNING)* -> IDLE
        IDLE | SCANNING -> PERMISSION_DENIED (camera acquisition failed)
        SCANNING -> ERROR (camera stream failed)
    """

    IDLE = "idle"
    SCANNING = "scanning"
    SUCCESS = "success"
    ERROR = "error"
    PERMISSION_DENIED = "permission_denied"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a context check: valid, or the list of reasons it is not."""

    reasons: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.reasons

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class ScanContext:
    """
    Event kind, location and (for B2B deliveries) client bound to a session.

    A client id given for a non-B2B event is dropped, so a stale client
    selection can never leak into a warehouse or boutique scan.
    """

    scan_event: ScanEvent
    location: str
    client_id: Optional[str] = None

    def __post_init__(self):
        if not self.scan_event.requires_client and self.client_id is not None:
            object.__setattr__(self, "client_id", None)

    def validate(self) -> ValidationResult:
        """
        Check the context is complete enough to log scans.

        Returns:
            ValidationResult with one reason per missing piece
        """
        reasons = []
        if not (self.location or "").strip():
            reasons.append("location is required")
        if self.scan_event.requires_client and not (self.client_id or "").strip():
            reasons.append(f"a B2B client is required for {self.scan_event.value}")
        return ValidationResult(reasons)


@dataclass(frozen=True)
class ScanLogEntry:
    """
    Record of one successful scan.

    Created by the scan session controller at emission time. Ownership
    moves to the Remote Ledger Service; the inventory store keeps the
    copy the server returned.
    """

    serial_number: str
    """Decoded QR payload (opaque)."""

    scan_event: ScanEvent
    """Checkpoint kind."""

    location: str
    """Where the scan happened."""

    timestamp: str
    """ISO 8601 timestamp."""

    client_id: Optional[str] = None
    """B2B client, only for DELIVERY_B2B."""

    @classmethod
    def create(
        cls,
        serial_number: str,
        context: ScanContext,
        now: Optional[datetime] = None
    ) -> "ScanLogEntry":
        """Build an entry for a decode under the given context."""
        now = now or datetime.now(timezone.utc)
        return cls(
            serial_number=serial_number,
            scan_event=context.scan_event,
            location=context.location,
            timestamp=now.isoformat(),
            client_id=context.client_id,
        )

    @property
    def recorded_at(self) -> Optional[datetime]:
        """Parsed timestamp, or None if the server sent something odd."""
        try:
            return datetime.fromisoformat(self.timestamp.replace('Z', '+00:00'))
        except (ValueError, AttributeError):
            return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire format."""
        result = {
            "serialNumber": self.serial_number,
            "scanEvent": self.scan_event.value,
            "location": self.location,
            "timestamp": self.timestamp,
        }
        if self.client_id:
            result["clientId"] = self.client_id
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScanLogEntry":
        """
        Create from the wire format.

        Raises:
            ValueError: If serialNumber or scanEvent is missing or unknown
        """
        if not isinstance(data, dict):
            raise ValueError(f"Scan log entry must be an object, got {type(data).__name__}")
        serial = data.get("serialNumber")
        if serial is None or str(serial) == "":
            raise ValueError("Scan log entry has no serialNumber")
        return cls(
            serial_number=str(serial),
            scan_event=ScanEvent.parse(data.get("scanEvent")),
            location=str(data.get("location", "")),
            timestamp=str(data.get("timestamp", "")),
            client_id=data.get("clientId") or None,
        )
