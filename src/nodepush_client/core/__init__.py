"""Core nodepush client components."""

from .samples import NodeReading, Sample, SensorReading, build_node_readings

__all__ = ["Sample", "SensorReading", "NodeReading", "build_node_readings"]
