"""Configuration module for the nodepush client."""

from .logger_config import setup_logging
from .settings import ConfigManager, ConnectorConfig, LoggingConfig, NodePushConfig, get_config_manager, get_current_config

__all__ = ["ConnectorConfig", "LoggingConfig", "NodePushConfig", "ConfigManager", "get_config_manager", "get_current_config", "setup_logging"]
