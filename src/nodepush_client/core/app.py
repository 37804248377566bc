from typing import Optional

from loguru import logger

from ..config import NodePushConfig, setup_logging
from ..orchestrator import PushOrchestrator
from ..sources import BaseSource, GatewayStatsSource
from .signal_handler import ShutdownSignals


class NodePushApp:
    """Main application class for the nodepush client."""

    def __init__(self, config: NodePushConfig, install_signal_handlers: bool = True) -> None:
        """Configure logging and signal handling.

        The pipeline itself is built in ``run`` once the configuration has
        been validated.
        """
        # Configure logging first, before any other operations
        setup_logging(config.logging)

        self.config = config
        self.orchestrator: Optional[PushOrchestrator] = None
        self.sources: list[BaseSource] = []

        self.signals = ShutdownSignals(install=install_signal_handlers)

    def _build(self) -> None:
        self.orchestrator = PushOrchestrator(self.config)

        if self.config.gateway_stats_enabled:
            producer = self.orchestrator.get_producer("gateway-stats")
            self.sources.append(GatewayStatsSource(producer, interval_seconds=self.config.gateway_stats_interval_seconds))

    def _shutdown(self, reason: str) -> bool:
        """Shut sources down and stop the pipeline."""
        for source in self.sources:
            source.shutdown()
        if self.orchestrator is None:
            return True
        return self.orchestrator.stop(reason=reason)

    def run(self, max_iterations: Optional[int] = None) -> bool:
        """Start the pipeline and tick sources until shutdown is requested.

        Args:
            max_iterations: Stop after this many loop iterations, None to run
                until a signal arrives
        """
        logger.info("Starting nodepush client")

        is_valid, errors = self.config.validate()
        if not is_valid:
            for error in errors:
                logger.error(f"Invalid configuration: {error}")
            return False

        try:
            self._build()
        except Exception as e:
            logger.error(f"Failed to build pipeline: {e}")
            return False

        if not self.orchestrator.start():
            return False

        for source in self.sources:
            source.initialize()

        iterations = 0
        try:
            while not self.signals.shutdown_requested:
                if max_iterations is not None and iterations >= max_iterations:
                    break
                for source in self.sources:
                    source.tick()
                iterations += 1
                if self.config.system_run_delay > 0:
                    self.signals.wait(self.config.system_run_delay)
        except Exception as e:
            logger.error(f"Error in main loop: {e}")
            self._shutdown(f"main loop error: {e}")
            return False

        return self._shutdown(self.signals.stop_reason)
