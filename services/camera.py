"""
Camera adapters for the scan session controller.

A camera runs its own reader thread and calls back into the controller:
``on_decode(text)`` for each QR payload and ``on_error(exc)`` if the stream
dies. The controller owns the camera exclusively and is the only caller of
``start``/``stop``.

OpenCV and pyzbar are imported on first use, so the proxy server and the
test suite run without them installed.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, List, Optional, Protocol

from core.exceptions import CameraUnavailableError
from logging_config import get_logger, set_thread_name


# Module logger
logger = get_logger(__name__)

DecodeCallback = Callable[[str], None]
ErrorCallback = Callable[[Exception], None]


class Camera(Protocol):
    """What the scan session controller needs from a camera."""

    def start(self, on_decode: DecodeCallback, on_error: ErrorCallback) -> None:
        """
        Acquire the device and begin decoding.

        Raises:
            CameraUnavailableError: If the device cannot be acquired
        """
        ...

    def stop(self) -> None:
        """Stop decoding and release the device. Calling it twice is a no-op."""
        ...


def _load_camera_libs():
    try:
        import cv2
        from pyzbar import pyzbar
    except ImportError as e:
        raise RuntimeError(
            "Camera scanning requires OpenCV (cv2) and pyzbar. "
            "Install the 'camera' extra. "
            f"(import error: {e})"
        )
    return cv2, pyzbar


class OpenCVCamera:
    """
    Webcam reader: cv2.VideoCapture frames decoded with pyzbar.

    One instance is one acquisition; create a new one for each session
    (the controller takes a factory for this reason).
    """

    def __init__(
        self,
        device_id: int = 0,
        resolution: tuple = (1280, 720),
        fps: int = 10,
        read_failure_limit: int = 30
    ):
        self.device_id = device_id
        self.resolution = resolution
        self.fps = fps
        self.read_failure_limit = read_failure_limit

        self._capture: Any = None
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._capture is not None

    def start(self, on_decode: DecodeCallback, on_error: ErrorCallback) -> None:
        cv2, pyzbar = _load_camera_libs()

        with self._lock:
            if self._capture is not None:
                logger.warning(f"Camera {self.device_id} already started")
                return

            capture = cv2.VideoCapture(self.device_id)
            if not capture.isOpened():
                capture.release()
                raise CameraUnavailableError(self.device_id)

            capture.set(cv2.CAP_PROP_FRAME_WIDTH, self.resolution[0])
            capture.set(cv2.CAP_PROP_FRAME_HEIGHT, self.resolution[1])
            capture.set(cv2.CAP_PROP_FPS, self.fps)

            self._capture = capture
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._read_loop,
                args=(capture, cv2, pyzbar, on_decode, on_error),
                name=f"Camera-{self.device_id}",
                daemon=True
            )
            self._thread.start()

        logger.info(f"Camera {self.device_id} started: {self.resolution[0]}x{self.resolution[1]} @ {self.fps}fps")

    def stop(self) -> None:
        with self._lock:
            capture, self._capture = self._capture, None
            thread, self._thread = self._thread, None

        if capture is None:
            return

        self._stop_event.set()
        try:
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout=2.0)
                if thread.is_alive():
                    logger.warning(f"Camera {self.device_id} reader did not stop cleanly")
        finally:
            capture.release()
            logger.info(f"Camera {self.device_id} released")

    def _read_loop(self, capture, cv2, pyzbar, on_decode, on_error) -> None:
        set_thread_name(f"Camera-{self.device_id}")
        failures = 0
        interval = 1.0 / max(1, self.fps)

        while not self._stop_event.is_set():
            ok, frame = capture.read()
            if not ok:
                failures += 1
                if failures >= self.read_failure_limit:
                    on_error(CameraUnavailableError(self.device_id, "video stream stopped"))
                    return
                time.sleep(interval)
                continue
            failures = 0

            for text in self.decode_frame(frame, cv2, pyzbar):
                if self._stop_event.is_set():
                    return
                on_decode(text)

            self._stop_event.wait(interval)

    @staticmethod
    def decode_frame(frame, cv2, pyzbar) -> List[str]:
        """Return every QR payload visible in ``frame``."""
        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        codes = []
        for symbol in pyzbar.decode(gray, symbols=[pyzbar.ZBarSymbol.QRCODE]):
            try:
                codes.append(symbol.data.decode('utf-8'))
            except UnicodeDecodeError:
                logger.debug("Skipping QR code with non-UTF-8 payload")
        return codes
