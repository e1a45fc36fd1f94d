"""
Unit tests for the reporting helpers.
"""

from modules.reporting import (
    UNKNOWN_PRODUCT,
    client_name,
    filter_cake_status,
    log_rows,
    product_id_from_serial,
    product_name_for_serial,
    summary_totals,
)
from models.catalog import B2BClient, InventorySummaryItem, Product
from models.dashboard import CakeStatus
from models.scan import ScanEvent, ScanLogEntry


PRODUCTS = [Product(id="OLV-001", name="Olive Cake"), Product(id="LMN", name="Lemon Tart")]
CLIENTS = [B2BClient(client_id="C-100", client_name="Hotel Negresco")]


def cake(serial, last_update):
    return CakeStatus(serial_number=serial, current_location="Boutique", status="In Stock",
                      last_update=last_update)


class TestSerialNumbers:

    def test_product_id_keeps_inner_dashes(self):
        assert product_id_from_serial("OLV-001-0042") == "OLV-001"

    def test_product_id_without_sequence(self):
        assert product_id_from_serial("LMN") == "LMN"

    def test_product_name(self):
        assert product_name_for_serial("LMN-7", PRODUCTS) == "Lemon Tart"
        assert product_name_for_serial("XYZ-1", PRODUCTS) == UNKNOWN_PRODUCT

    def test_client_name(self):
        assert client_name("C-100", CLIENTS) == "Hotel Negresco"
        assert client_name("C-404", CLIENTS) == "C-404"
        assert client_name(None, CLIENTS) == ""


class TestCakeStatusFilter:

    def test_newest_first(self):
        items = [
            cake("OLV-001-0001", "2026-05-01T08:00:00Z"),
            cake("OLV-001-0002", "2026-05-01T10:00:00Z"),
            cake("OLV-001-0003", "garbage"),
        ]

        serials = [c.serial_number for c in filter_cake_status(items)]

        assert serials == ["OLV-001-0002", "OLV-001-0001", "OLV-001-0003"]

    def test_search_is_case_insensitive(self):
        items = [cake("OLV-001-0001", "2026-05-01T08:00:00Z"), cake("LMN-1", "2026-05-01T09:00:00Z")]

        assert [c.serial_number for c in filter_cake_status(items, " olv ")] == ["OLV-001-0001"]


class TestSummaries:

    def test_summary_totals(self):
        totals = summary_totals([
            InventorySummaryItem("OLV-001", "Olive Cake", 3),
            InventorySummaryItem("LMN", "Lemon Tart", 2),
        ])

        assert totals.total_items == 5
        assert totals.unique_products == 2

    def test_log_rows(self):
        logs = [ScanLogEntry("OLV-001-0001", ScanEvent.DELIVERY_B2B, "Warehouse",
                             "2026-05-01T10:00:00Z", client_id="C-100")]

        rows = log_rows(logs, PRODUCTS, CLIENTS)

        assert rows == [{
            "productName": "Olive Cake",
            "serialNumber": "OLV-001-0001",
            "scanEvent": "DELIVERY_B2B",
            "location": "Warehouse",
            "client": "Hotel Negresco",
            "timestamp": "2026-05-01T10:00:00Z",
        }]
