"""
Catalog and directory models.

Products, B2B clients, users and per-product summary counts as the
Remote Ledger Service returns them. Wire format is camelCase.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional


class UserRole(Enum):
    """Roles known to the user directory."""

    WAREHOUSE_MANAGER = "Warehouse Manager"
    """May manage products and clear the scan log."""

    SCANNER = "Scanner"
    """May scan only."""


def _optional_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Product:
    """A product in the catalog. Serial numbers are ``<product id>-<sequence>``."""

    id: str
    name: str
    category: Optional[str] = None
    unit_of_measure: Optional[str] = None
    unit_cost: Optional[float] = None
    supplier_name: Optional[str] = None
    reorder_level: Optional[int] = None
    reorder_quantity: Optional[int] = None
    storage_location: Optional[str] = None
    shelf_life_days: Optional[int] = None
    is_perishable: bool = False

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "isPerishable": self.is_perishable,
        }
        optional = {
            "category": self.category,
            "unitOfMeasure": self.unit_of_measure,
            "unitCost": self.unit_cost,
            "supplierName": self.supplier_name,
            "reorderLevel": self.reorder_level,
            "reorderQuantity": self.reorder_quantity,
            "storageLocation": self.storage_location,
            "shelfLifeDays": self.shelf_life_days,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        is_perishable = data.get("isPerishable", False)
        if isinstance(is_perishable, str):
            is_perishable = is_perishable.strip().lower() in ("true", "yes", "1")
        return cls(
            id=str(data.get("id", "")),
            name=str(data.get("name", "")),
            category=data.get("category") or None,
            unit_of_measure=data.get("unitOfMeasure") or None,
            unit_cost=_optional_float(data.get("unitCost")),
            supplier_name=data.get("supplierName") or None,
            reorder_level=_optional_int(data.get("reorderLevel")),
            reorder_quantity=_optional_int(data.get("reorderQuantity")),
            storage_location=data.get("storageLocation") or None,
            shelf_life_days=_optional_int(data.get("shelfLifeDays")),
            is_perishable=bool(is_perishable),
        )


@dataclass(frozen=True)
class B2BClient:
    """A business client that receives DELIVERY_B2B scans."""

    client_id: str
    client_name: str
    contact_person: str = ""
    address: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clientId": self.client_id,
            "clientName": self.client_name,
            "contactPerson": self.contact_person,
            "address": self.address,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "B2BClient":
        return cls(
            client_id=str(data.get("clientId", "")),
            client_name=str(data.get("clientName", "")),
            contact_person=str(data.get("contactPerson", "") or ""),
            address=str(data.get("address", "") or ""),
        )


@dataclass(frozen=True)
class User:
    """
    A user directory entry.

    The directory sheet also stores passwords; they are never read into
    this model.
    """

    email: str
    name: str
    role: UserRole
    location: str = ""

    @property
    def is_manager(self) -> bool:
        return self.role is UserRole.WAREHOUSE_MANAGER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
            "location": self.location,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        try:
            role = UserRole(data.get("role"))
        except ValueError:
            role = UserRole.SCANNER
        return cls(
            email=str(data.get("email", "")),
            name=str(data.get("name", "")),
            role=role,
            location=str(data.get("location", "") or ""),
        )


@dataclass(frozen=True)
class InventorySummaryItem:
    """Number of scanned items for one product."""

    product_id: str
    product_name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "count": self.count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InventorySummaryItem":
        return cls(
            product_id=str(data.get("productId", "")),
            product_name=str(data.get("productName", "")),
            count=_optional_int(data.get("count")) or 0,
        )
