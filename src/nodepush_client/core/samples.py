"""Sample models for the nodepush client.

Readings flow through the client as:
Sources → SampleBuffer → HttpPushConnector → API

A ``Sample`` is what producers push into the buffer. The connector turns each
sample into a ``NodeReading``, which is the unit of the wire payload.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class Sample:
    """One buffered reading from a device or sensor group."""

    id: str
    data: Dict[str, Any] = field(default_factory=dict)
    received_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if self.data is None:
            self.data = {}

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Sample:
        """Build a sample from a ``{"id": ..., "data": {...}}`` mapping.

        Raises:
            ValueError: If the mapping is malformed
        """
        if not isinstance(raw, Mapping):
            raise ValueError("Invalid data object specified (arg #1)")

        sample_id = raw.get("id")
        if not isinstance(sample_id, str) or not sample_id:
            raise ValueError(f"Sample does not define a valid id: [{sample_id}]")

        data = raw.get("data") or {}
        if not isinstance(data, Mapping):
            raise ValueError(f"Sample data must be a mapping: [{sample_id}]")

        return cls(id=sample_id, data=dict(data))

    def sensor_count(self) -> int:
        """Return the number of readings carried by this sample."""
        return len(self.data)

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        """Seconds since the sample was created."""
        return ((now or datetime.now()) - self.received_at).total_seconds()


@dataclass
class SensorReading:
    """A single named value inside a node reading."""

    name: str
    value: Any

    def to_dict(self) -> Dict[str, Any]:
        value = self.value
        # NaN and infinity have no JSON form; they go out as null
        if isinstance(value, float) and not math.isfinite(value):
            value = None
        return {"name": self.name, "value": value}


@dataclass
class NodeReading:
    """Wire-format unit built from one sample."""

    mac: str
    sensors: List[SensorReading] = field(default_factory=list)

    @classmethod
    def from_sample(cls, sample: Sample, mac: str) -> NodeReading:
        """Build a node reading, naming each sensor ``<sample.id>-<dataType>``."""
        sensors = [SensorReading(name=f"{sample.id}-{data_type}", value=value) for data_type, value in sample.data.items()]
        return cls(mac=mac, sensors=sensors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mac": self.mac,
            "sensors": [sensor.to_dict() for sensor in self.sensors],
        }


def build_node_readings(samples: List[Sample], mac: str) -> Optional[List[NodeReading]]:
    """Convert samples into node readings.

    Returns:
        One node reading per sample, or None if the batch holds no sensor
        values at all
    """
    readings = [NodeReading.from_sample(sample, mac) for sample in samples]

    if not any(reading.sensors for reading in readings):
        return None

    return readings
