"""
Fire-and-forget background work.

Scan submissions and the re-fetches they trigger run on short-lived daemon
threads, one per task, so the camera callback and the caller never wait on
the network. Components take a ``Dispatcher`` so tests can run the work
inline.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

Dispatcher = Callable[[Callable[[], Any], str], None]


def run_in_thread(task: Callable[[], Any], name: str) -> None:
    """
    Run ``task`` on a new daemon thread named ``name``.

    Exceptions raised by the task are logged; nobody is waiting for them.
    """

    def _main():
        try:
            task()
        except Exception as e:
            logger.error(f"Background task {name} failed: {e}", exc_info=True)

    thread = threading.Thread(target=_main, name=name, daemon=True)
    thread.start()


def run_inline(task: Callable[[], Any], name: str) -> None:
    """Run ``task`` immediately in the calling thread."""
    task()
