"""Base classes and interfaces for sample sources."""

from __future__ import annotations

from typing import Protocol

from ..core.samples import Sample


class SampleEmitter(Protocol):
    """Protocol for emitting samples to the buffer."""

    def emit(self, sample: Sample) -> bool:
        """Emit a sample to the buffer."""
        ...


class BaseSource:
    """Base class for all sample sources."""

    def __init__(self, sample_emitter: SampleEmitter):
        """Initialize base source.

        Args:
            sample_emitter: Sample emitter for the buffer
        """
        self.sample_emitter = sample_emitter

    def tick(self) -> None:
        """Perform one sampling cycle. Override in subclasses."""
        pass

    def initialize(self) -> None:
        """Initialize the source. Override in subclasses if needed."""
        pass

    def shutdown(self) -> None:
        """Shutdown the source. Override in subclasses if needed."""
        pass
