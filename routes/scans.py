"""
Scan log routes.

Handles:
- POST /api/scans       - Log one scan
- GET  /api/logs        - Full scan log
- POST /api/logs/clear  - Erase the scan log
- GET  /api/summary     - Per-product scan counts

Only presence of required fields is checked here. Business rules (the B2B
client requirement) are enforced by the scan session controller.
"""

from flask import Blueprint

from logging_config import get_logger
from .helpers import bad_request, forward, json_body, sanitize_text


# Module logger
logger = get_logger(__name__)

scans_bp = Blueprint("scans", __name__, url_prefix="/api")


@scans_bp.route("/scans", methods=["POST"])
def add_scan():
    """Forward a scan to the ledger; data is the stored entry."""
    body = json_body()
    if body is None:
        return bad_request("Request body must be a JSON object")

    serial_number = str(body.get("serialNumber") or "").strip()
    scan_event = str(body.get("scanEvent") or "").strip()
    location = sanitize_text(body.get("location"))

    if not serial_number or not scan_event or not location:
        return bad_request("Serial number, scan event, and location are required")

    scan = {
        "serialNumber": serial_number,
        "scanEvent": scan_event,
        "location": location,
    }
    client_id = sanitize_text(body.get("clientId"))
    if client_id:
        scan["clientId"] = client_id
    timestamp = str(body.get("timestamp") or "").strip()
    if timestamp:
        scan["timestamp"] = timestamp

    logger.info(f"Scan {serial_number} ({scan_event} @ {location})")
    return forward("addScan", lambda ledger: ledger.add_scan(scan))


@scans_bp.route("/logs", methods=["GET"])
def get_logs():
    return forward("getLogs", lambda ledger: ledger.get_logs())


@scans_bp.route("/logs/clear", methods=["POST"])
def clear_logs():
    """Erase every scan. The client store only offers this to managers."""
    logger.warning("Clearing the scan log")
    return forward("clearLogs", lambda ledger: ledger.clear_logs())


@scans_bp.route("/summary", methods=["GET"])
def get_summary():
    return forward("getSummary", lambda ledger: ledger.get_summary())
