"""Translate process signals into a graceful pipeline shutdown."""

from __future__ import annotations

import signal
import sys
import threading
from types import FrameType
from typing import Optional

from loguru import logger


class ShutdownSignals:
    """Record the first exit signal so the main loop can stop the pipeline.

    The handler only sets a flag; the pipeline is stopped by the main loop on
    its own thread. A second signal while the shutdown is still running exits
    the process immediately.
    """

    SIGNAL_NAMES = ("SIGINT", "SIGTERM", "SIGHUP", "SIGBREAK")

    def __init__(self, install: bool = True) -> None:
        self._requested = threading.Event()
        self.received_signal: Optional[str] = None
        if install:
            self._install_handlers()

    @property
    def shutdown_requested(self) -> bool:
        return self._requested.is_set()

    @property
    def stop_reason(self) -> str:
        if self.received_signal is None:
            return "normal application exit"
        return f"{self.received_signal} signal"

    def request_shutdown(self, reason: str) -> None:
        """Ask the main loop to stop, as if a signal named ``reason`` arrived."""
        if self._requested.is_set():
            return
        self.received_signal = reason
        self._requested.set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, waking early on shutdown."""
        return self._requested.wait(timeout)

    def _install_handlers(self) -> None:
        for name in self.SIGNAL_NAMES:
            sig = getattr(signal, name, None)
            if sig is None:
                continue
            try:
                signal.signal(sig, self._handle_signal)
            except (ValueError, OSError):  # not allowed off the main thread
                logger.warning(f"Could not hook signal {name}")

    def _handle_signal(self, signum: int, frame: Optional[FrameType]) -> None:
        signal_name = signal.Signals(signum).name
        if self._requested.is_set():
            logger.warning(f"Received {signal_name} during shutdown, exiting immediately")
            sys.exit(1)

        logger.info(f"Received {signal_name}, pushing remaining samples and shutting down")
        self.request_shutdown(signal_name)
