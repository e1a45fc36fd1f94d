"""
Headless scan station.

Runs a scan session against a local webcam and logs every decoded QR code
through the proxy API. This is the station-side counterpart of the browser
scanning page.

Usage:
    python scan_station.py --event BOUTIQUE_STOCK_SCAN --location Nice-Boutique
    python scan_station.py --event DELIVERY_B2B --location Warehouse --client C-100

Exit codes:
    0  stopped by the operator (Ctrl+C)
    1  camera could not be acquired or the video stream died
    2  invalid scan context (unknown event, missing location/client)
"""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from typing import List, Optional

from config import Config
from core.proxy_client import ProxyAPIClient
from logging_config import get_logger, setup_logging
from modules.reporting import product_name_for_serial
from models.scan import ScanEvent, SessionState
from services.camera import OpenCVCamera
from services.inventory_store import InventoryStore
from services.notifications import CallbackFeedback, LoggingNotifier
from services.scan_session import ScanSessionController


# Module logger
logger = get_logger(__name__)


def describe_scan(serial_number: str, products) -> str:
    """Console line for a decoded serial, e.g. "OLV-001-0001 (Olive Cake)"."""
    return f"{serial_number} ({product_name_for_serial(serial_number, products)})"


def _announcer(store: InventoryStore, quiet: bool):
    def announce(serial_number: str) -> None:
        logger.info(f"Scanned {describe_scan(serial_number, store.products)}")
        if not quiet:
            # Terminal bell stands in for the scan page chime
            print("\a", end="", flush=True)
    return announce


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Log QR scans from a webcam.")
    parser.add_argument("--event", required=True,
                        help="Scan event: " + ", ".join(e.value for e in ScanEvent))
    parser.add_argument("--location", default=Config.DEFAULT_LOCATION,
                        help="Station location (default: DEFAULT_LOCATION)")
    parser.add_argument("--client", default=None, help="B2B client id (DELIVERY_B2B only)")
    parser.add_argument("--camera", type=int, default=Config.CAMERA_DEVICE_ID, help="Video device index")
    parser.add_argument("--proxy", default=Config.PROXY_BASE_URL, help="Proxy API base URL")
    parser.add_argument("--quiet", action="store_true", help="No terminal bell on scans")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(
        log_level=logging.DEBUG if args.debug else logging.INFO,
        enable_file_logging=False,
    )

    try:
        scan_event = ScanEvent.parse(args.event)
    except ValueError as e:
        logger.error(str(e))
        return 2

    notifier = LoggingNotifier()
    store = InventoryStore(
        ProxyAPIClient(args.proxy, timeout_seconds=Config.PROXY_TIMEOUT_SECONDS),
        notifier=notifier,
    )

    if scan_event.requires_client and args.client:
        if store.fetch_b2b_clients() and store.find_client(args.client) is None:
            logger.error(f"Unknown B2B client: {args.client}")
            return 2

    controller = ScanSessionController(
        store,
        camera_factory=lambda: OpenCVCamera(args.camera),
        location=args.location,
        scan_event=scan_event,
        notifier=notifier,
        feedback=CallbackFeedback(_announcer(store, args.quiet)),
        cooldown_seconds=Config.SCAN_COOLDOWN_SECONDS,
        feedback_seconds=Config.SCAN_FEEDBACK_SECONDS,
    )
    controller.select_client(args.client)

    check = controller.validate_context()
    if not check.valid:
        for reason in check.reasons:
            logger.error(f"Cannot start: {reason}")
        return 2

    # Product names for the console; scanning works without them
    store.fetch_products()

    stop_requested = threading.Event()
    signal.signal(signal.SIGTERM, lambda signum, frame: stop_requested.set())

    with controller:
        if not controller.start():
            return 1
        logger.info("Scanning. Press Ctrl+C to stop.")
        try:
            while not stop_requested.wait(0.5):
                if controller.state is SessionState.ERROR:
                    return 1
        except KeyboardInterrupt:
            pass

    logger.info("Station stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
