"""In-memory sample buffer for the nodepush client.

Producers append samples to the buffer; the push connector drains it once per
poll cycle. Draining takes everything currently buffered and leaves the buffer
empty in one locked step, so a sample is either in the drained batch or still
in the buffer, never both.
"""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Mapping

from loguru import logger

from ..core.samples import Sample


class SampleBuffer:
    """Thread-safe ordered buffer of samples."""

    def __init__(self):
        self._samples: deque[Sample] = deque()
        self._lock = threading.RLock()

        # Statistics
        self._total_added = 0
        self._total_drained = 0

    def add(self, sample: Sample) -> bool:
        """Append a sample to the buffer.

        Args:
            sample: Sample to buffer

        Returns:
            True once the sample is buffered
        """
        with self._lock:
            self._samples.append(sample)
            self._total_added += 1

            logger.debug(f"Pushed sample {sample.id} into buffer, buffer size: {len(self._samples)}")
            return True

    def add_data(self, data: Mapping[str, Any]) -> bool:
        """Append a raw ``{"id": ..., "data": {...}}`` mapping to the buffer.

        Raises:
            ValueError: If the mapping does not describe a valid sample
        """
        return self.add(Sample.from_dict(data))

    def drain_all(self) -> list[Sample]:
        """Remove and return every buffered sample, oldest first."""
        with self._lock:
            samples = list(self._samples)
            self._samples.clear()
            self._total_drained += len(samples)

        if samples:
            logger.debug(f"Drained {len(samples)} samples from buffer")

        return samples

    def size(self) -> int:
        """Return the current buffer size."""
        with self._lock:
            return len(self._samples)

    def is_empty(self) -> bool:
        """Check if the buffer is empty."""
        with self._lock:
            return len(self._samples) == 0

    def get_stats(self) -> dict:
        """Get buffer statistics."""
        with self._lock:
            return {
                "current_size": len(self._samples),
                "oldest_sample_age_seconds": self._samples[0].age_seconds() if self._samples else None,
                "total_added": self._total_added,
                "total_drained": self._total_drained,
            }


class SampleProducer:
    """Helper class for components to produce samples."""

    def __init__(self, buffer: SampleBuffer, component_name: str = "unknown"):
        """Initialize producer.

        Args:
            buffer: Buffer to push samples into
            component_name: Name of the component producing samples
        """
        self.buffer = buffer
        self.component_name = component_name

    def emit(self, sample: Sample) -> bool:
        """Emit a sample to the buffer.

        Args:
            sample: Sample to emit

        Returns:
            True if successful, False if the buffer rejected the sample
        """
        try:
            return self.buffer.add(sample)
        except Exception as e:
            logger.error(f"{self.component_name}: Failed to emit sample {sample.id}: {e}")
            return False
