"""
Data models for Scan Ledger.

This module contains immutable dataclasses for:
- ScanEvent, ScanContext, ScanLogEntry, SessionState: Scanning
- Product, B2BClient, User, InventorySummaryItem: Catalog and directories
- CakeStatus, LiveOperationsData: Ledger-derived dashboards
- ApiResponse: The success/data/error envelope

All wire formats are camelCase; use to_dict()/from_dict() at the edges.
"""

from .scan import ScanEvent, ScanContext, ScanLogEntry, SessionState, ValidationResult
from .catalog import Product, B2BClient, User, UserRole, InventorySummaryItem
from .dashboard import (
    CakeStatus,
    LiveOperationsData,
    ProductionSummary,
    InventoryByLocation,
    SalesSummary,
)
from .envelope import ApiResponse

__all__ = [
    # Scan models
    "ScanEvent",
    "ScanContext",
    "ScanLogEntry",
    "SessionState",
    "ValidationResult",
    # Catalog models
    "Product",
    "B2BClient",
    "User",
    "UserRole",
    "InventorySummaryItem",
    # Dashboard models
    "CakeStatus",
    "LiveOperationsData",
    "ProductionSummary",
    "InventoryByLocation",
    "SalesSummary",
    # Envelope
    "ApiResponse",
]
