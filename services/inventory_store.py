"""
Client-side inventory store.

Caches everything the presentation layer shows (scan logs, summary, product
catalog, B2B clients, users, dashboards) and exposes fetch/mutate operations
that go through the proxy API.

SINGLE SOURCE OF TRUTH:
    - One InventoryStore is created per station/page and passed to whoever
      needs it; there is no module-level instance
    - Collections are only changed by the store's own operations
    - Readers get tuples, which they cannot mutate
    - A mutation response that carries a fresh collection REPLACES the cache
      (no merging), so local and remote never silently diverge

FAILURES:
    - A failed call leaves the cache untouched
    - The error is recorded per collection and surfaced through the notifier
    - Nothing is retried

Usage:
    store = InventoryStore(ProxyAPIClient(base_url), notifier=LoggingNotifier())
    store.fetch_logs()
    for entry in store.logs:
        ...
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional, Tuple

from core.exceptions import PermissionDeniedError
from core.proxy_client import ProxyAPIClient
from models.catalog import B2BClient, InventorySummaryItem, Product, User
from models.dashboard import CakeStatus, LiveOperationsData
from models.envelope import ApiResponse
from models.scan import ScanLogEntry
from logging_config import get_logger
from .background import Dispatcher, run_in_thread
from .notifications import LoggingNotifier, Notifier


# Module logger
logger = get_logger(__name__)

# Collection names (also the keys of ``loading`` and ``errors``)
LOGS = "logs"
SUMMARY = "summary"
PRODUCTS = "products"
B2B_CLIENTS = "b2b_clients"
USERS = "users"
CAKE_STATUS = "cake_status"
LIVE_OPERATIONS = "live_operations"

COLLECTIONS = (LOGS, SUMMARY, PRODUCTS, B2B_CLIENTS, USERS, CAKE_STATUS, LIVE_OPERATIONS)

_LABELS = {
    LOGS: "logs",
    SUMMARY: "summary",
    PRODUCTS: "products",
    B2B_CLIENTS: "B2B clients",
    USERS: "users",
    CAKE_STATUS: "cake status",
    LIVE_OPERATIONS: "live operations",
}


def _parse_list(data: Any, parse: Callable[[Dict[str, Any]], Any]) -> Tuple[Any, ...]:
    if data is None:
        return ()
    if not isinstance(data, list):
        raise ValueError(f"expected a list, got {type(data).__name__}")
    return tuple(parse(item) for item in data)


class InventoryStore:
    """
    Cache of remote inventory state with per-collection loading/error flags.

    Attributes:
        loading: collection name -> True while a fetch is in flight
        errors: collection name -> last error message (None after success)
    """

    def __init__(
        self,
        api: ProxyAPIClient,
        notifier: Optional[Notifier] = None,
        dispatch: Optional[Dispatcher] = None
    ):
        """
        Initialize an empty store.

        Args:
            api: Proxy API client (anything with the same methods)
            notifier: Where user-facing messages go (default: log only)
            dispatch: Runs fire-and-forget re-fetches (default: daemon thread)
        """
        self._api = api
        self._notifier = notifier or LoggingNotifier()
        self._dispatch = dispatch or run_in_thread
        self._lock = threading.Lock()

        self._logs: Tuple[ScanLogEntry, ...] = ()
        self._summary: Tuple[InventorySummaryItem, ...] = ()
        self._products: Tuple[Product, ...] = ()
        self._b2b_clients: Tuple[B2BClient, ...] = ()
        self._users: Tuple[User, ...] = ()
        self._cake_status: Tuple[CakeStatus, ...] = ()
        self._live_operations: Optional[LiveOperationsData] = None

        # Dashboards are only re-fetched after a scan once somebody looked at them
        self._loaded = set()

        self.loading: Dict[str, bool] = {name: False for name in COLLECTIONS}
        self.errors: Dict[str, Optional[str]] = {name: None for name in COLLECTIONS}

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    @property
    def logs(self) -> Tuple[ScanLogEntry, ...]:
        """Scan log, newest first."""
        return self._logs

    @property
    def summary(self) -> Tuple[InventorySummaryItem, ...]:
        return self._summary

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    @property
    def b2b_clients(self) -> Tuple[B2BClient, ...]:
        return self._b2b_clients

    @property
    def users(self) -> Tuple[User, ...]:
        return self._users

    @property
    def cake_status(self) -> Tuple[CakeStatus, ...]:
        return self._cake_status

    @property
    def live_operations(self) -> Optional[LiveOperationsData]:
        return self._live_operations

    def is_loaded(self, collection: str) -> bool:
        """Whether ``collection`` has been fetched successfully at least once."""
        return collection in self._loaded

    # =========================================================================
    # FETCH OPERATIONS
    # =========================================================================

    def _fetch(
        self,
        collection: str,
        request: Callable[[], ApiResponse],
        parse: Callable[[Any], Any]
    ) -> bool:
        """
        Fetch one collection and replace its cache.

        Returns:
            True if the cache was replaced, False on any failure
        """
        label = _LABELS[collection]
        self.loading[collection] = True
        try:
            response = request()
            if not response.success:
                return self._fail(collection, f"Failed to fetch {label}: {response.error}")

            try:
                value = parse(response.data)
            except (TypeError, ValueError, AttributeError) as e:
                return self._fail(collection, f"Failed to fetch {label}: malformed data ({e})")

            with self._lock:
                setattr(self, f"_{collection}", value)
                self._loaded.add(collection)
            self.errors[collection] = None
            logger.debug(f"Fetched {label}")
            return True
        finally:
            self.loading[collection] = False

    def _fail(self, collection: str, message: str) -> bool:
        self.errors[collection] = message
        logger.warning(message)
        self._notifier.error(message)
        return False

    def fetch_logs(self) -> bool:
        return self._fetch(LOGS, self._api.get_logs,
                           lambda data: _parse_list(data, ScanLogEntry.from_dict))

    def fetch_summary(self) -> bool:
        return self._fetch(SUMMARY, self._api.get_summary,
                           lambda data: _parse_list(data, InventorySummaryItem.from_dict))

    def fetch_products(self) -> bool:
        return self._fetch(PRODUCTS, self._api.get_products,
                           lambda data: _parse_list(data, Product.from_dict))

    def fetch_b2b_clients(self) -> bool:
        return self._fetch(B2B_CLIENTS, self._api.get_b2b_clients,
                           lambda data: _parse_list(data, B2BClient.from_dict))

    def fetch_users(self) -> bool:
        return self._fetch(USERS, self._api.get_users,
                           lambda data: _parse_list(data, User.from_dict))

    def fetch_cake_status(self) -> bool:
        return self._fetch(CAKE_STATUS, self._api.get_cake_status,
                           lambda data: _parse_list(data, CakeStatus.from_dict))

    def fetch_live_operations(self) -> bool:
        return self._fetch(LIVE_OPERATIONS, self._api.get_live_operations,
                           LiveOperationsData.from_dict)

    # =========================================================================
    # MUTATIONS
    # =========================================================================

    def append_scan(self, entry: ScanLogEntry) -> Optional[ScanLogEntry]:
        """
        Send a scan to the ledger and prepend the stored entry to the log.

        The entry the server returns is cached, not ``entry``, so any
        server-side normalization shows up locally. Summary (and any
        dashboard already on screen) is re-fetched in the background;
        the caller does not wait for it.

        Args:
            entry: Entry built by the scan session controller

        Returns:
            The server's entry, or None if the scan was not logged
        """
        response = self._api.add_scan(entry.to_dict())
        if not response.success:
            self._fail(LOGS, f"Failed to log scan {entry.serial_number}: {response.error}")
            return None

        try:
            stored = ScanLogEntry.from_dict(response.data)
        except ValueError as e:
            # Logged remotely but unreadable here: resync instead of guessing
            logger.warning(f"Scan {entry.serial_number} logged, but response entry unreadable: {e}")
            self._refresh_after_scan(include_logs=True)
            self._notifier.success(f"Logged: {entry.serial_number}")
            return None

        with self._lock:
            self._logs = (stored,) + self._logs
        self.errors[LOGS] = None

        logger.info(f"Scan logged: {stored.serial_number} ({stored.scan_event.value} @ {stored.location})")
        self._notifier.success(f"Logged: {stored.serial_number}")
        self._refresh_after_scan()
        return stored

    def _refresh_after_scan(self, include_logs: bool = False) -> None:
        tasks = [("Refresh-summary", self.fetch_summary)]
        if include_logs:
            tasks.append(("Refresh-logs", self.fetch_logs))
        if self.is_loaded(CAKE_STATUS):
            tasks.append(("Refresh-cake-status", self.fetch_cake_status))
        if self.is_loaded(LIVE_OPERATIONS):
            tasks.append(("Refresh-live-ops", self.fetch_live_operations))
        for name, task in tasks:
            self._dispatch(task, name)

    def clear_all_logs(self, user: Optional[User]) -> bool:
        """
        Erase the whole scan log (Warehouse Manager only).

        Local log and summary caches are cleared only after the ledger
        confirms; products and clients are left alone.

        Args:
            user: The signed-in user

        Returns:
            True if the ledger cleared the log
        """
        if user is None or not user.is_manager:
            denied = PermissionDeniedError("clear the inventory log", user.role.value if user else None)
            return self._fail(LOGS, denied.message)

        self.loading[LOGS] = True
        self.loading[SUMMARY] = True
        try:
            response = self._api.clear_logs()
            if not response.success:
                return self._fail(LOGS, f"Failed to clear logs: {response.error}")

            with self._lock:
                self._logs = ()
                self._summary = ()
            self.errors[LOGS] = None
            self.errors[SUMMARY] = None
        finally:
            self.loading[LOGS] = False
            self.loading[SUMMARY] = False

        logger.info(f"Inventory log cleared by {user.email}")
        self._notifier.success("Inventory log cleared.")
        self._dispatch(self.fetch_summary, "Refresh-summary")
        return True

    def add_product(self, product: Product) -> bool:
        """Create or update a product; the catalog is replaced by the server's list."""
        response = self._api.add_product(product.to_dict())
        return self._replace_products(response, f"Product \"{product.name}\" saved.",
                                      f"Failed to save product {product.id}")

    def delete_product(self, product_id: str) -> bool:
        """Remove a product; the catalog is replaced by the server's list."""
        response = self._api.delete_product(product_id)
        return self._replace_products(response, "Product deleted.",
                                      f"Failed to delete product {product_id}")

    def _replace_products(self, response: ApiResponse, done: str, failed: str) -> bool:
        if not response.success:
            return self._fail(PRODUCTS, f"{failed}: {response.error}")

        try:
            products = _parse_list(response.data, Product.from_dict)
        except (TypeError, ValueError, AttributeError) as e:
            return self._fail(PRODUCTS, f"{failed}: malformed catalog ({e})")

        with self._lock:
            self._products = products
            self._loaded.add(PRODUCTS)
        self.errors[PRODUCTS] = None

        self._notifier.success(done)
        self._dispatch(self.fetch_summary, "Refresh-summary")
        return True

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def find_client(self, client_id: str) -> Optional[B2BClient]:
        return next((c for c in self._b2b_clients if c.client_id == client_id), None)

    def find_user(self, email: str) -> Optional[User]:
        email = (email or "").strip().lower()
        return next((u for u in self._users if u.email.lower() == email), None)
