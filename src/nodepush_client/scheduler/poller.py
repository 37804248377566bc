"""Poller that triggers a handler at a fixed interval."""

from __future__ import annotations

import threading
from typing import Any, Callable, Optional

from loguru import logger


class Poller:
    """Calls a registered handler at periodic intervals on a background thread.

    The first call happens one interval after ``start()``. The handler is
    never invoked concurrently with itself by the same poller.
    """

    def __init__(self, poller_id: str, interval_seconds: float, handler: Callable[[], Any]):
        """Initialize the poller.

        Args:
            poller_id: Unique id for the poller (used in logging)
            interval_seconds: Time between handler calls
            handler: Routine triggered at each interval

        Raises:
            ValueError: If any argument is invalid
        """
        if not isinstance(poller_id, str) or not poller_id:
            raise ValueError("Invalid id specified (arg #1)")
        if isinstance(interval_seconds, bool) or not isinstance(interval_seconds, (int, float)) or interval_seconds <= 0:
            raise ValueError("Invalid polling interval specified (arg #2)")
        if not callable(handler):
            raise ValueError("Invalid handler specified (arg #3)")

        self._id = poller_id
        self._interval = float(interval_seconds)
        self._handler = handler

        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._is_active = False
        self._trigger_count = 0

        self._logger = logger.bind(component=f"poller:{poller_id}")

    @property
    def is_active(self) -> bool:
        """True while the poller is triggering at regular intervals."""
        return self._is_active

    @property
    def trigger_count(self) -> int:
        return self._trigger_count

    def start(self) -> None:
        """Start the poller.

        Raises:
            RuntimeError: If the poller is already active
        """
        if self._is_active:
            raise RuntimeError("Cannot start poller. Poller is already active")

        self._logger.info("Starting poller")
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._poll_loop, name=f"poller-{self._id}", daemon=True)
        self._is_active = True
        self._thread.start()

    def stop(self) -> None:
        """Stop a currently active poller and wait for its thread to exit.

        Raises:
            RuntimeError: If the poller is not active
        """
        if not self._is_active:
            raise RuntimeError("Cannot stop poller. Poller is not active")

        self._logger.info("Stopping poller")
        self._stop_event.set()
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=max(5.0, self._interval))
        self._thread = None
        self._is_active = False

    def _poll_loop(self) -> None:
        """Main polling loop."""
        while not self._stop_event.wait(self._interval):
            self._logger.debug("Triggering handler")
            self._trigger_count += 1
            try:
                self._handler()
            except Exception as e:
                self._logger.error(f"Error in poller handler: {e}")

        self._logger.debug("Poller loop finished")
