"""
Scan session controller.

Owns the camera for one scanning page/station and turns QR decodes into
scan log entries. Guarantees that each physical code yields at most one
logged scan per cooldown window, and only under a complete scan context.

STATE MACHINE:
    IDLE --start()--> SCANNING            (context valid, camera acquired)
    IDLE --start()--> PERMISSION_DENIED   (camera acquisition failed)
    SCANNING --decode--> SUCCESS          (transient, feedback window)
    SUCCESS --feedback window--> SCANNING (camera still active)
    SCANNING --stop() / event change / close()--> IDLE
    SCANNING --camera stream died--> ERROR
    PERMISSION_DENIED | ERROR --start()--> retry

COOLDOWN:
    Set synchronously, under the lock, BEFORE the entry is dispatched to
    the store. A second decode that fires while the first submission is
    still on the network sees the cooldown and is dropped. The cooldown
    (2 s) outlasts the feedback window (0.5 s): the session looks like it
    is scanning again, but repeated frames of the same code are swallowed.

OPTIMISTIC FEEDBACK:
    Success feedback is given as soon as the entry is emitted, before the
    ledger confirms. Feedback latency is favoured over confirmed
    durability. A failed append is surfaced through the notifier and is
    not retried; the operator re-scans.

CAMERA DISCIPLINE:
    Every exit path (stop, event change, close, stream error) detaches the
    camera under the lock and stops it outside the lock, exactly once.
    A stop that raises still counts as released. Stopping twice is a no-op.

Usage:
    controller = ScanSessionController(
        store,
        camera_factory=lambda: OpenCVCamera(0),
        location="Nice-Boutique",
        scan_event=ScanEvent.BOUTIQUE_STOCK_SCAN,
    )
    if controller.can_start:
        controller.start()
    ...
    controller.close()
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from core.exceptions import InvalidScanContextError
from models.scan import ScanContext, ScanEvent, ScanLogEntry, SessionState, ValidationResult
from logging_config import get_logger
from .background import Dispatcher, run_in_thread
from .camera import Camera
from .inventory_store import InventoryStore
from .notifications import LoggingFeedback, LoggingNotifier, Notifier, ScanFeedback


# Module logger
logger = get_logger(__name__)

DEFAULT_COOLDOWN_SECONDS = 2.0
DEFAULT_FEEDBACK_SECONDS = 0.5


class ScanSessionController:
    """
    State machine for one camera scanning session.

    All public methods are safe to call from the UI thread while decode
    callbacks arrive on the camera's reader thread.

    Attributes:
        last_entry: Most recent emitted entry (None before the first scan)
        last_error: Message of the last camera failure (None when healthy)
    """

    def __init__(
        self,
        store: InventoryStore,
        camera_factory: Callable[[], Camera],
        location: str,
        scan_event: ScanEvent = ScanEvent.PRODUCTION_SCAN,
        notifier: Optional[Notifier] = None,
        feedback: Optional[ScanFeedback] = None,
        dispatch: Optional[Dispatcher] = None,
        clock: Callable[[], float] = time.monotonic,
        cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
        feedback_seconds: float = DEFAULT_FEEDBACK_SECONDS
    ):
        """
        Initialize an idle session.

        Args:
            store: Inventory store that receives emitted entries
            camera_factory: Creates a fresh camera for each start()
            location: Location of this station (user's location)
            scan_event: Initially selected event kind
            notifier: User-facing messages (default: log only)
            feedback: Success beep/LED hook (default: log only)
            dispatch: Runs store submissions (default: daemon thread per scan)
            clock: Monotonic seconds; tests pass a fake
            cooldown_seconds: Quiet period after each emitted scan
            feedback_seconds: How long the session reads as SUCCESS
        """
        if feedback_seconds > cooldown_seconds:
            raise ValueError("feedback window must not outlast the cooldown")

        self._store = store
        self._camera_factory = camera_factory
        self._notifier = notifier or LoggingNotifier()
        self._feedback = feedback or LoggingFeedback()
        self._dispatch = dispatch or run_in_thread
        self._clock = clock
        self._cooldown_seconds = cooldown_seconds
        self._feedback_seconds = feedback_seconds

        self._event = scan_event
        self._location = location or ""
        self._client_id: Optional[str] = None

        self._state = SessionState.IDLE
        self._camera: Optional[Camera] = None
        self._cooldown_until = float("-inf")
        self._success_until = float("-inf")
        self._lock = threading.RLock()

        self.last_entry: Optional[ScanLogEntry] = None
        self.last_error: Optional[str] = None

    # =========================================================================
    # CONTEXT SELECTION
    # =========================================================================

    @property
    def scan_event(self) -> ScanEvent:
        return self._event

    @property
    def location(self) -> str:
        return self._location

    @property
    def client_id(self) -> Optional[str]:
        return self._client_id

    @property
    def context(self) -> ScanContext:
        """Context new entries will be attributed to."""
        with self._lock:
            return ScanContext(self._event, self._location, self._client_id)

    def validate_context(self) -> ValidationResult:
        return self.context.validate()

    def select_event(self, scan_event: ScanEvent) -> None:
        """
        Change the event kind.

        Clears the selected B2B client. If a session is running it is
        stopped; the operator must start again under the new context.
        """
        with self._lock:
            if scan_event is self._event:
                return
            previous = self._event
            self._event = scan_event
            self._client_id = None
            camera = self._detach_camera()
        logger.info(f"Scan event changed: {previous.value} -> {scan_event.value}")
        if camera is not None:
            logger.info("Session stopped by event change")
            self._stop_camera(camera)

    def select_client(self, client_id: Optional[str]) -> None:
        """Select (or clear with None) the B2B client for DELIVERY_B2B scans."""
        with self._lock:
            self._client_id = (client_id or "").strip() or None

    def set_location(self, location: str) -> None:
        with self._lock:
            self._location = location or ""

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def state(self) -> SessionState:
        with self._lock:
            if self._state is SessionState.SCANNING and self._clock() < self._success_until:
                return SessionState.SUCCESS
            return self._state

    @property
    def is_active(self) -> bool:
        """Whether a camera is held (SCANNING or SUCCESS)."""
        with self._lock:
            return self._camera is not None

    @property
    def cooldown_active(self) -> bool:
        with self._lock:
            return self._clock() < self._cooldown_until

    @property
    def can_start(self) -> bool:
        """Whether the start action should be enabled."""
        with self._lock:
            return self._camera is None and self.validate_context().valid

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> bool:
        """
        Acquire a camera and start decoding.

        Returns:
            True if the session is scanning, False if the camera could not
            be acquired (state becomes PERMISSION_DENIED)

        Raises:
            InvalidScanContextError: If the context is incomplete
        """
        with self._lock:
            if self._camera is not None:
                logger.warning("Scan session already running")
                return True

            result = self.validate_context()
            if not result.valid:
                raise InvalidScanContextError(result.reasons)

            camera = self._camera_factory()
            try:
                camera.start(self.submit_scan, self._on_camera_error)
            except Exception as e:
                self._state = SessionState.PERMISSION_DENIED
                self.last_error = str(e)
                logger.error(f"Camera acquisition failed: {e}")
                self._notifier.error(f"Camera unavailable: {e}")
                return False

            self._camera = camera
            self._state = SessionState.SCANNING
            self.last_error = None
            context = self.context

        logger.info(
            f"Scan session started: {context.scan_event.value} @ {context.location}"
            + (f" for client {context.client_id}" if context.client_id else "")
        )
        return True

    def stop(self) -> None:
        """Stop scanning and release the camera. Safe to call repeatedly."""
        with self._lock:
            camera = self._detach_camera()
        if camera is not None:
            logger.info("Scan session stopped")
            self._stop_camera(camera)

    def close(self) -> None:
        """Tear down the session (page unmount / station exit)."""
        self.stop()

    def __enter__(self) -> "ScanSessionController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _detach_camera(self) -> Optional[Camera]:
        # Caller holds the lock
        camera, self._camera = self._camera, None
        if camera is not None:
            self._state = SessionState.IDLE
            self._success_until = float("-inf")
        return camera

    def _stop_camera(self, camera: Camera) -> None:
        # Outside the lock: stop() may join the reader thread, which may be
        # waiting for the lock inside submit_scan()
        try:
            camera.stop()
        except Exception as e:
            logger.warning(f"Camera stop failed, treating camera as released: {e}")

    def _on_camera_error(self, error: Exception) -> None:
        with self._lock:
            camera = self._detach_camera()
            if camera is None:
                return
            self._state = SessionState.ERROR
            self.last_error = str(error)
        logger.error(f"Camera stream failed: {error}")
        self._notifier.error(f"Camera stopped: {error}")
        self._stop_camera(camera)

    # =========================================================================
    # DECODES
    # =========================================================================

    def submit_scan(self, decoded_text: str) -> Optional[ScanLogEntry]:
        """
        Handle one decode event.

        Emits a ScanLogEntry when the session is active, the cooldown has
        expired and the context is valid; otherwise the decode is dropped
        without any user-visible error.

        Args:
            decoded_text: QR payload (the serial number)

        Returns:
            The emitted entry, or None if the decode was swallowed
        """
        serial = (decoded_text or "").strip()

        with self._lock:
            if self._camera is None or self._state is not SessionState.SCANNING:
                return None
            if not serial:
                return None

            now = self._clock()
            if now < self._cooldown_until:
                logger.debug(f"Decode of {serial} dropped (cooldown)")
                return None

            context = ScanContext(self._event, self._location, self._client_id)
            if not context.validate().valid:
                logger.debug(f"Decode of {serial} dropped (incomplete context)")
                return None

            self._cooldown_until = now + self._cooldown_seconds
            self._success_until = now + self._feedback_seconds
            entry = ScanLogEntry.create(serial, context)
            self.last_entry = entry

        logger.info(f"Decoded {serial} ({context.scan_event.value} @ {context.location})")

        try:
            self._feedback.success(serial)
        except Exception as e:
            logger.warning(f"Scan feedback failed: {e}")

        self._dispatch(lambda: self._append(entry), f"Scan-{serial[:24]}")
        return entry

    def _append(self, entry: ScanLogEntry) -> None:
        # The store reports ledger failures itself; this only guards
        # against unexpected errors on the submission thread
        try:
            self._store.append_scan(entry)
        except Exception as e:
            logger.error(f"Submitting scan {entry.serial_number} failed: {e}", exc_info=True)
            self._notifier.error(f"Failed to log scan {entry.serial_number}: {e}")
