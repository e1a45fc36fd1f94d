"""
Services layer for Scan Ledger.

This module contains the client-side services:
- InventoryStore: Cache of remote state, fetch/mutate through the proxy
- ScanSessionController: Camera lifecycle, cooldown, scan-context rules
- OpenCVCamera: Webcam reader with QR decoding

Thread Model:
    UI / station main thread
    ├── Camera reader thread (decode callbacks)
    └── Short-lived submission/re-fetch threads (one per task)
"""

from .inventory_store import InventoryStore
from .scan_session import ScanSessionController
from .camera import Camera, OpenCVCamera
from .notifications import LoggingNotifier, RecordingNotifier

__all__ = [
    "InventoryStore",
    "ScanSessionController",
    "Camera",
    "OpenCVCamera",
    "LoggingNotifier",
    "RecordingNotifier",
]
