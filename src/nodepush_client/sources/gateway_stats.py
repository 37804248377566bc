"""Gateway stats source for the nodepush client.

This module samples basic health figures of the gateway itself so the ingest
API sees the gateway as a node even when no external sensors report.
"""

from __future__ import annotations

import os
import time
from typing import Any, Dict, Optional

from loguru import logger

from ..core.samples import Sample
from .base import BaseSource, SampleEmitter


class GatewayStatsSource(BaseSource):
    """Emits periodic load and uptime readings for the gateway."""

    SAMPLE_ID = "gateway"

    def __init__(self, sample_emitter: SampleEmitter, interval_seconds: float = 5.0):
        """Initialize gateway stats source.

        Args:
            sample_emitter: Sample emitter for the buffer
            interval_seconds: Minimum time between samples
        """
        super().__init__(sample_emitter)
        self.interval_seconds = interval_seconds
        self._started_at = time.monotonic()
        self._last_sample: Optional[float] = None

    def initialize(self) -> None:
        self._started_at = time.monotonic()

    def tick(self) -> None:
        """Emit a sample if the interval has elapsed."""
        now = time.monotonic()

        if self._last_sample is None or now - self._last_sample >= self.interval_seconds:
            self._emit_stats()
            self._last_sample = now

    def collect(self) -> Dict[str, Any]:
        """Read the current gateway figures."""
        data: Dict[str, Any] = {"uptime": round(time.monotonic() - self._started_at, 1)}

        # Not available on every platform
        if hasattr(os, "getloadavg"):
            try:
                load1, load5, load15 = os.getloadavg()
                data.update({"load1": load1, "load5": load5, "load15": load15})
            except OSError:
                logger.debug("Load average unavailable")

        return data

    def _emit_stats(self) -> None:
        sample = Sample(id=self.SAMPLE_ID, data=self.collect())

        success = self.sample_emitter.emit(sample)
        if not success:
            logger.warning("Failed to emit gateway stats")
