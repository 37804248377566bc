"""Configuration management for the nodepush client.

This module provides the immutable connector configuration model and the
process-wide client configuration, which allows environment variable
overrides.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ConnectorConfig(BaseModel):
    """Static configuration for the HTTP push connector."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True, extra="forbid")

    url: str = Field(..., min_length=1, description="Base URL of the ingest endpoint")
    headers: Dict[str, str] = Field(default_factory=dict, description="Headers applied to every request")
    mac: str = Field(..., min_length=1, description="Hardware identifier of this gateway")
    timeout_seconds: Optional[float] = Field(None, gt=0, description="Request timeout, None for the client default")
    max_workers: Optional[int] = Field(None, gt=0, description="Size of the send thread pool")

    @field_validator("url")
    @classmethod
    def check_scheme(cls, v: str) -> str:
        """Only plain HTTP(S) endpoints are supported."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"url must start with http:// or https://: [{v}]")
        return v

    @property
    def nodes_url(self) -> str:
        """Endpoint that node readings are posted to."""
        return f"{self.url.rstrip('/')}/api/nodes"


@dataclass
class LoggingConfig:
    """Configuration for log output."""

    level: str = "INFO"
    to_console: bool = True
    to_file: bool = False
    file_path: Path = field(default_factory=lambda: Path.cwd() / "logs" / "nodepush.log")
    rotation: str = "10 MB"
    retention: str = "7 days"


@dataclass
class NodePushConfig:
    """Complete nodepush client configuration."""

    # Server settings
    server_url: str = "http://localhost:8000"
    headers: Dict[str, str] = field(default_factory=dict)
    timeout_seconds: Optional[float] = None  # None = no enforced deadline
    max_workers: Optional[int] = None

    # Gateway identification
    connector_id: str = "http-push"
    mac: str = ""

    # Polling
    poll_interval_seconds: float = 15.0
    flush_on_stop: bool = True

    # Sources
    gateway_stats_enabled: bool = True
    gateway_stats_interval_seconds: float = 5.0
    system_run_delay: float = 0.1  # Main loop delay

    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self):
        """Apply environment variable overrides."""
        self._apply_env_overrides()

    def _apply_env_overrides(self):
        """Apply configuration overrides from environment variables."""
        if server_url := os.getenv("NODEPUSH_SERVER_URL"):
            self.server_url = server_url

        if mac := os.getenv("NODEPUSH_MAC"):
            self.mac = mac

        if headers := os.getenv("NODEPUSH_HEADERS"):
            try:
                parsed = json.loads(headers)
                if not isinstance(parsed, dict):
                    raise ValueError("expected a JSON object")
                self.headers = {str(k): str(v) for k, v in parsed.items()}
            except ValueError as e:
                logger.warning(f"Invalid headers: {headers} ({e})")

        if poll_interval := os.getenv("NODEPUSH_POLL_INTERVAL"):
            try:
                self.poll_interval_seconds = float(poll_interval)
            except ValueError:
                logger.warning(f"Invalid poll interval: {poll_interval}")

        if timeout := os.getenv("NODEPUSH_TIMEOUT"):
            try:
                self.timeout_seconds = float(timeout)
            except ValueError:
                logger.warning(f"Invalid timeout: {timeout}")

        if log_level := os.getenv("NODEPUSH_LOG_LEVEL"):
            self.logging.level = log_level.upper()

        if log_file := os.getenv("NODEPUSH_LOG_FILE"):
            self.logging.file_path = Path(log_file)
            self.logging.to_file = True

    def get_connector_config(self) -> ConnectorConfig:
        """Get configuration for the HTTP push connector.

        Raises:
            pydantic.ValidationError: If the settings do not form a valid
                connector configuration
        """
        return ConnectorConfig(
            url=self.server_url,
            headers=dict(self.headers),
            mac=self.mac,
            timeout_seconds=self.timeout_seconds,
            max_workers=self.max_workers,
        )

    def validate(self) -> tuple[bool, list[str]]:
        """Validate the configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        errors = []

        if not self.server_url:
            errors.append("Server URL is required")
        elif not self.server_url.startswith(("http://", "https://")):
            errors.append("Server URL must use http or https")

        if not self.mac:
            errors.append("MAC address is required")

        if not self.connector_id:
            errors.append("Connector id is required")

        if self.poll_interval_seconds <= 0:
            errors.append("Poll interval must be positive")

        if self.timeout_seconds is not None and self.timeout_seconds <= 0:
            errors.append("Timeout must be positive")

        if self.gateway_stats_enabled and self.gateway_stats_interval_seconds <= 0:
            errors.append("Gateway stats interval must be positive")

        return len(errors) == 0, errors


class ConfigManager:
    """Manages nodepush client configuration."""

    def __init__(self):
        """Initialize configuration manager."""
        self._config: Optional[NodePushConfig] = None

    def load_config(
        self,
        server_url: Optional[str] = None,
        mac: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        poll_interval_seconds: Optional[float] = None,
    ) -> NodePushConfig:
        """Load configuration with optional overrides.

        Args:
            server_url: Server URL override
            mac: Gateway MAC override
            headers: Extra headers, merged over any configured ones
            poll_interval_seconds: Poll interval override

        Returns:
            Configured NodePushConfig instance
        """
        config = NodePushConfig()

        # Apply parameter overrides
        if server_url:
            config.server_url = server_url

        if mac:
            config.mac = mac

        if headers:
            config.headers.update(headers)

        if poll_interval_seconds:
            config.poll_interval_seconds = poll_interval_seconds

        self._config = config
        return config

    def get_config(self) -> Optional[NodePushConfig]:
        """Get current configuration."""
        return self._config

    def validate_config(self) -> tuple[bool, list[str]]:
        """Validate current configuration.

        Returns:
            Tuple of (is_valid, error_messages)
        """
        if not self._config:
            return False, ["No configuration loaded"]

        return self._config.validate()


# Global configuration manager instance
_config_manager = ConfigManager()


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager."""
    return _config_manager


def get_current_config() -> Optional[NodePushConfig]:
    """Get the current configuration."""
    return _config_manager.get_config()
