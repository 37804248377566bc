"""Push orchestrator for coordinating the nodepush client sample flow.

This module coordinates the sample pipeline:
Sources → SampleBuffer → (Poller) → HttpPushConnector → API

It owns the lifecycle of the buffer, connector and poller and provides a
single interface for the application.
"""

from __future__ import annotations

from concurrent.futures import Future
from datetime import datetime
from typing import Any, Dict, Optional

from loguru import logger

from ..buffer import SampleBuffer, SampleProducer
from ..config.settings import NodePushConfig
from ..connectors import ConnectorState, HttpPushConnector
from ..core.samples import Sample
from ..scheduler import Poller


class PushOrchestrator:
    """Orchestrates buffering, polling and pushing of samples."""

    def __init__(self, config: NodePushConfig):
        """Initialize the push orchestrator.

        Args:
            config: Client configuration

        Raises:
            pydantic.ValidationError: If the connector settings are invalid
        """
        self.config = config
        self._running = False
        self._start_time: Optional[datetime] = None

        self._init_components()

    def _init_components(self) -> None:
        """Initialize all pipeline components."""
        logger.info("Initializing push components...")

        self.buffer = SampleBuffer()
        logger.info("Initialized sample buffer")

        self.connector = HttpPushConnector(self.config.connector_id, self.config.get_connector_config(), self.buffer)
        logger.info(f"Initialized HTTP push connector: {self.connector.config.nodes_url}")

        self.poller = Poller(self.config.connector_id, self.config.poll_interval_seconds, self.connector.process)
        logger.info(f"Initialized poller with {self.config.poll_interval_seconds}s interval")

        self.sample_producer = SampleProducer(buffer=self.buffer, component_name="orchestrator")

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> bool:
        """Start the connector and the poller.

        Returns:
            True if started successfully, False otherwise
        """
        if self._running:
            logger.warning("Pipeline is already running")
            return True

        try:
            logger.info("Starting nodepush pipeline...")
            self._start_time = datetime.now()

            self.connector.start()
            self.poller.start()
            self._running = True

            logger.info(f"Pipeline started successfully - Gateway: {self.connector.config.mac}, API: {self.connector.config.nodes_url}")
            return True

        except Exception as e:
            logger.error(f"Failed to start pipeline: {e}")
            return False

    def stop(self, reason: str = "requested") -> bool:
        """Stop the pipeline gracefully.

        Returns:
            True if stopped successfully, False otherwise
        """
        if not self._running:
            logger.warning("Pipeline is not running")
            return True

        try:
            logger.info(f"Stopping nodepush pipeline ({reason})...")
            self._running = False

            self.poller.stop()

            # Push whatever is still buffered before shutting the connector down
            if self.config.flush_on_stop and not self.buffer.is_empty():
                logger.info(f"Flushing {self.buffer.size()} remaining samples")
                self.connector.process()

            if self.connector.state == ConnectorState.STARTED:
                self.connector.stop()

            self._log_final_stats()

            logger.info(f"Pipeline stopped successfully ({reason})")
            return True

        except Exception as e:
            logger.error(f"Error stopping pipeline: {e}")
            return False

    def emit_sample(self, sample: Sample) -> bool:
        """Emit a sample into the buffer.

        Returns:
            True if accepted, False if rejected
        """
        if not self._running:
            logger.warning("Pipeline not running, dropping sample")
            return False

        return self.sample_producer.emit(sample)

    def get_producer(self, component_name: str) -> SampleProducer:
        """Get a sample producer for a component."""
        return SampleProducer(buffer=self.buffer, component_name=component_name)

    def force_push(self) -> Optional[Future]:
        """Run a push cycle immediately instead of waiting for the poller."""
        return self.connector.process()

    def get_stats(self) -> Dict[str, Any]:
        """Get pipeline statistics.

        Returns:
            Dictionary with pipeline statistics
        """
        return {
            "pipeline": {
                "running": self._running,
                "start_time": self._start_time.isoformat() if self._start_time else None,
                "uptime_seconds": ((datetime.now() - self._start_time).total_seconds() if self._start_time else 0),
                "connector_id": self.config.connector_id,
                "mac": self.config.mac,
                "poll_triggers": self.poller.trigger_count,
            },
            "buffer": self.buffer.get_stats(),
            "connector": self.connector.get_stats(),
        }

    def _log_final_stats(self) -> None:
        """Log final pipeline statistics on shutdown."""
        try:
            stats = self.get_stats()

            logger.info("Final Pipeline Statistics:")
            logger.info(f"  Uptime: {stats['pipeline']['uptime_seconds']:.1f} seconds")
            logger.info(f"  Samples buffered: {stats['buffer']['total_added']}")
            logger.info(f"  Push cycles: {stats['connector']['total_cycles']}")
            logger.info(f"  Payloads sent: {stats['connector']['total_payloads_sent']}")
            logger.info(f"  Payloads failed: {stats['connector']['total_payloads_failed']}")
            logger.info(f"  Success rate: {stats['connector']['success_rate']:.1%}")

        except Exception as e:
            logger.error(f"Error logging final stats: {e}")


def create_default_orchestrator(
    server_url: str,
    mac: str,
    headers: Optional[Dict[str, str]] = None,
    poll_interval_seconds: Optional[float] = None,
) -> PushOrchestrator:
    """Create a push orchestrator with default configuration.

    Args:
        server_url: Base URL of the ingest API
        mac: Hardware identifier of this gateway
        headers: Headers applied to every request
        poll_interval_seconds: Optional poll interval override

    Returns:
        Configured push orchestrator
    """
    config = NodePushConfig()

    # Explicit arguments win over environment overrides
    config.server_url = server_url
    config.mac = mac
    if headers:
        config.headers = dict(headers)

    if poll_interval_seconds:
        config.poll_interval_seconds = poll_interval_seconds

    return PushOrchestrator(config)
