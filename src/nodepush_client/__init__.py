"""nodepush client - Buffered sensor readings pushed to an HTTP ingest API."""

from .config import get_config_manager
from .connectors import HttpPushConnector
from .orchestrator import PushOrchestrator

__version__ = "1.0.0"

__all__ = ["HttpPushConnector", "PushOrchestrator", "get_config_manager"]
