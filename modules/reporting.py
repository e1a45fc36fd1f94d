"""
Client-side reporting helpers.

Filtering, sorting and small aggregates over data the store has already
fetched. Nothing here calls the network.

The scan station uses these to name the product behind each decoded serial;
any other presentation layer over InventoryStore can reuse them.

Serial numbers are ``<product id>-<sequence>``; the product id itself may
contain dashes (``OLV-001-0042`` belongs to product ``OLV-001``).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from models.catalog import B2BClient, InventorySummaryItem, Product
from models.dashboard import CakeStatus
from models.scan import ScanLogEntry

UNKNOWN_PRODUCT = "Unknown product"

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def product_id_from_serial(serial_number: str) -> str:
    """Strip the trailing sequence from a serial number."""
    serial = str(serial_number)
    parts = serial.split("-")
    if len(parts) > 1:
        return "-".join(parts[:-1])
    return serial


def product_name_for_serial(serial_number: str, products: Iterable[Product]) -> str:
    names = {p.id: p.name for p in products}
    return names.get(product_id_from_serial(serial_number), UNKNOWN_PRODUCT)


def client_name(client_id: Optional[str], clients: Iterable[B2BClient]) -> str:
    """Display name for a client id; empty for scans without a client."""
    if not client_id:
        return ""
    names = {c.client_id: c.client_name for c in clients}
    return names.get(client_id, client_id)


def _as_utc(value: Optional[datetime]) -> datetime:
    if value is None:
        return _OLDEST
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def filter_cake_status(items: Iterable[CakeStatus], search: str = "") -> List[CakeStatus]:
    """
    Items whose serial number contains ``search`` (case-insensitive),
    most recently updated first. Items with unreadable timestamps sort last.
    """
    needle = (search or "").strip().lower()
    matches = [c for c in items if needle in c.serial_number.lower()]
    return sorted(matches, key=lambda c: _as_utc(c.last_update_at), reverse=True)


@dataclass(frozen=True)
class SummaryTotals:
    total_items: int
    unique_products: int


def summary_totals(summary: Iterable[InventorySummaryItem]) -> SummaryTotals:
    items = list(summary)
    return SummaryTotals(
        total_items=sum(item.count for item in items),
        unique_products=len(items),
    )


def log_rows(
    logs: Iterable[ScanLogEntry],
    products: Iterable[Product],
    clients: Iterable[B2BClient]
) -> List[Dict[str, str]]:
    """Rows for the inventory log table, in cache order (newest first)."""
    product_names = {p.id: p.name for p in products}
    clients = list(clients)
    rows = []
    for entry in logs:
        rows.append({
            "productName": product_names.get(product_id_from_serial(entry.serial_number), UNKNOWN_PRODUCT),
            "serialNumber": entry.serial_number,
            "scanEvent": entry.scan_event.value,
            "location": entry.location,
            "client": client_name(entry.client_id, clients),
            "timestamp": entry.timestamp,
        })
    return rows
