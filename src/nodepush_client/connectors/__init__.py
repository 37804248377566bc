"""Connectors that move buffered readings off the gateway."""

from .base import Connector, ConnectorState, ConnectorStateError
from .http_push import HttpPushConnector, PushResponse

__all__ = ["Connector", "ConnectorState", "ConnectorStateError", "HttpPushConnector", "PushResponse"]
