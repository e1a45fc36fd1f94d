"""
Unit tests for the OpenCV camera adapter.

cv2 and pyzbar are replaced by mocks, so these run without a webcam or
either library installed.
"""

import sys
import threading
import pytest
from unittest.mock import MagicMock, patch

from core.exceptions import CameraUnavailableError
from services.camera import OpenCVCamera, _load_camera_libs


# Fixtures

@pytest.fixture
def cv2():
    fake_cv2 = MagicMock()
    capture = fake_cv2.VideoCapture.return_value
    capture.isOpened.return_value = True
    capture.read.return_value = (True, "frame")
    return fake_cv2


@pytest.fixture
def pyzbar():
    fake_pyzbar = MagicMock()
    fake_pyzbar.decode.return_value = []
    return fake_pyzbar


@pytest.fixture
def libs(cv2, pyzbar):
    with patch("services.camera._load_camera_libs", return_value=(cv2, pyzbar)):
        yield cv2, pyzbar


def qr(payload: bytes):
    symbol = MagicMock()
    symbol.data = payload
    return symbol


# Tests for OpenCVCamera

class TestOpenCVCamera:
    """Acquisition, decoding and release."""

    def test_missing_libraries(self):
        with patch.dict(sys.modules, {"cv2": None}):
            with pytest.raises(RuntimeError, match="OpenCV"):
                _load_camera_libs()

    def test_open_failure_raises_and_releases(self, libs, cv2):
        cv2.VideoCapture.return_value.isOpened.return_value = False
        camera = OpenCVCamera(device_id=3)

        with pytest.raises(CameraUnavailableError) as exc_info:
            camera.start(MagicMock(), MagicMock())

        assert exc_info.value.device == 3
        cv2.VideoCapture.return_value.release.assert_called_once()
        assert camera.is_open is False

    def test_decodes_and_stops(self, libs, cv2, pyzbar):
        pyzbar.decode.return_value = [qr(b"OLV-001-0001")]
        decoded = threading.Event()
        seen = []

        def on_decode(text):
            seen.append(text)
            decoded.set()

        camera = OpenCVCamera(device_id=0, fps=100)
        camera.start(on_decode, MagicMock())
        assert decoded.wait(timeout=2.0)

        camera.stop()
        camera.stop()

        assert seen[0] == "OLV-001-0001"
        assert camera.is_open is False
        cv2.VideoCapture.return_value.release.assert_called_once()

    def test_stream_failure_reports_error(self, libs, cv2):
        cv2.VideoCapture.return_value.read.return_value = (False, None)
        failed = threading.Event()
        errors = []

        def on_error(exc):
            errors.append(exc)
            failed.set()

        camera = OpenCVCamera(device_id=0, fps=100, read_failure_limit=3)
        camera.start(MagicMock(), on_error)
        assert failed.wait(timeout=2.0)
        camera.stop()

        assert isinstance(errors[0], CameraUnavailableError)
        assert cv2.VideoCapture.return_value.release.call_count == 1

    def test_stop_without_start(self):
        OpenCVCamera().stop()

    def test_decode_frame_skips_non_utf8(self, cv2, pyzbar):
        pyzbar.decode.return_value = [qr(b"\xff\xfe"), qr(b"OLV-001-0002")]

        assert OpenCVCamera.decode_frame("frame", cv2, pyzbar) == ["OLV-001-0002"]
        assert pyzbar.decode.call_args.kwargs["symbols"] == [pyzbar.ZBarSymbol.QRCODE]
