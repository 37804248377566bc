"""Sample sources that feed the buffer."""

from .base import BaseSource, SampleEmitter
from .gateway_stats import GatewayStatsSource

__all__ = ["BaseSource", "SampleEmitter", "GatewayStatsSource"]
