"""
Derived dashboard models.

The Remote Ledger Service computes these from the scan log; the client
only displays, filters and sorts them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, Optional


def _count(data: Dict[str, Any], key: str) -> int:
    try:
        return int(data.get(key, 0) or 0)
    except (TypeError, ValueError):
        return 0


@dataclass(frozen=True)
class CakeStatus:
    """Where a single serialized item was last seen."""

    serial_number: str
    current_location: str
    status: str
    last_update: str
    """ISO 8601 timestamp of the latest scan."""

    @property
    def last_update_at(self) -> Optional[datetime]:
        try:
            return datetime.fromisoformat(self.last_update.replace('Z', '+00:00'))
        except (ValueError, AttributeError):
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "serialNumber": self.serial_number,
            "currentLocation": self.current_location,
            "status": self.status,
            "lastUpdate": self.last_update,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CakeStatus":
        return cls(
            serial_number=str(data.get("serialNumber", "")),
            current_location=str(data.get("currentLocation", "")),
            status=str(data.get("status", "")),
            last_update=str(data.get("lastUpdate", "")),
        )


@dataclass(frozen=True)
class ProductionSummary:
    produced_today: int = 0
    total_produced: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "producedToday": self.produced_today,
            "totalProduced": self.total_produced,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProductionSummary":
        return cls(
            produced_today=_count(data, "producedToday"),
            total_produced=_count(data, "totalProduced"),
        )


@dataclass(frozen=True)
class InventoryByLocation:
    in_production_warehouse: int = 0
    in_transit: int = 0
    at_boutique: int = 0
    at_marche: int = 0
    at_saleya: int = 0

    @property
    def total(self) -> int:
        return (
            self.in_production_warehouse + self.in_transit
            + self.at_boutique + self.at_marche + self.at_saleya
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "inProductionWarehouse": self.in_production_warehouse,
            "inTransit": self.in_transit,
            "atBoutique": self.at_boutique,
            "atMarche": self.at_marche,
            "atSaleya": self.at_saleya,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InventoryByLocation":
        return cls(
            in_production_warehouse=_count(data, "inProductionWarehouse"),
            in_transit=_count(data, "inTransit"),
            at_boutique=_count(data, "atBoutique"),
            at_marche=_count(data, "atMarche"),
            at_saleya=_count(data, "atSaleya"),
        )


@dataclass(frozen=True)
class SalesSummary:
    sold_today_b2c: int = 0
    delivered_today_b2b: int = 0
    total_sold_delivered: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "soldTodayB2C": self.sold_today_b2c,
            "deliveredTodayB2B": self.delivered_today_b2b,
            "totalSoldDelivered": self.total_sold_delivered,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SalesSummary":
        return cls(
            sold_today_b2c=_count(data, "soldTodayB2C"),
            delivered_today_b2b=_count(data, "deliveredTodayB2B"),
            total_sold_delivered=_count(data, "totalSoldDelivered"),
        )


@dataclass(frozen=True)
class LiveOperationsData:
    """
    Production, inventory and sales rollup for the live operations board.

    Missing sections come back as zeroed summaries rather than None so
    the board can always render.
    """

    production_summary: ProductionSummary = field(default_factory=ProductionSummary)
    inventory_by_location: InventoryByLocation = field(default_factory=InventoryByLocation)
    sales_summary: SalesSummary = field(default_factory=SalesSummary)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productionSummary": self.production_summary.to_dict(),
            "inventoryByLocation": self.inventory_by_location.to_dict(),
            "salesSummary": self.sales_summary.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LiveOperationsData":
        if not isinstance(data, dict):
            raise ValueError("Live operations data must be an object")
        return cls(
            production_summary=ProductionSummary.from_dict(data.get("productionSummary") or {}),
            inventory_by_location=InventoryByLocation.from_dict(data.get("inventoryByLocation") or {}),
            sales_summary=SalesSummary.from_dict(data.get("salesSummary") or {}),
        )
