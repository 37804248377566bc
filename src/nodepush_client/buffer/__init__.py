"""Sample buffering module for the nodepush client."""

from .sample_buffer import SampleBuffer, SampleProducer

__all__ = ["SampleBuffer", "SampleProducer"]
