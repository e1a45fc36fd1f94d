"""
User-facing notification and feedback hooks.

The browser version showed toasts and played a beep; headless stations and
tests plug in their own implementations. The defaults only log.
"""

from __future__ import annotations

import threading
from typing import Callable, List, Protocol, Tuple

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class Notifier(Protocol):
    """Transient user notification channel (toast equivalent)."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...


class ScanFeedback(Protocol):
    """Audio/haptic/LED feedback for a successful decode."""

    def success(self, serial_number: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes every message to the application log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)

    def info(self, message: str) -> None:
        logger.info(message)


class RecordingNotifier:
    """
    Notifier that keeps messages in memory.

    Used by tests to assert on what the user would have been shown.
    """

    def __init__(self):
        self._messages: List[Tuple[str, str]] = []
        self._lock = threading.Lock()

    def _record(self, level: str, message: str) -> None:
        with self._lock:
            self._messages.append((level, message))

    def success(self, message: str) -> None:
        self._record("success", message)

    def error(self, message: str) -> None:
        self._record("error", message)

    def info(self, message: str) -> None:
        self._record("info", message)

    @property
    def messages(self) -> List[Tuple[str, str]]:
        with self._lock:
            return list(self._messages)

    def of_level(self, level: str) -> List[str]:
        return [m for lvl, m in self.messages if lvl == level]


class LoggingFeedback:
    """Feedback hook that only logs. Stations with a buzzer replace it."""

    def success(self, serial_number: str) -> None:
        logger.debug(f"Feedback: scanned {serial_number}")


class CallbackFeedback:
    """Feedback hook that forwards to a plain callable (e.g. a GPIO beep)."""

    def __init__(self, callback: Callable[[str], None]):
        self._callback = callback

    def success(self, serial_number: str) -> None:
        self._callback(serial_number)
