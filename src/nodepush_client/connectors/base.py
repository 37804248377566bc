"""Base class and lifecycle states for nodepush connectors."""

from __future__ import annotations

from enum import Enum

from loguru import logger


class ConnectorState(str, Enum):
    """Lifecycle states of a connector."""

    INIT = "init"
    STARTING_UP = "starting_up"
    STARTED = "started"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    ERROR = "error"


class ConnectorStateError(RuntimeError):
    """Raised when a lifecycle operation is not allowed in the current state."""


class Connector:
    """Base class for connectors that talk to a device or the cloud.

    Child classes override ``_configure``, ``_start`` and ``_stop``; callers
    use ``start`` and ``stop``, which drive the state machine:
    init -> starting_up -> started -> shutting_down -> stopped, with any
    failure moving the connector to error.
    """

    def __init__(self, connector_id: str, connector_type: str):
        """Initialize the connector.

        Args:
            connector_id: Unique id for the connector
            connector_type: Kind of connector, "cloud" or "device"

        Raises:
            ValueError: If the id or type is empty
        """
        if not isinstance(connector_id, str) or not connector_id:
            raise ValueError("Invalid connector id specified (arg #1)")
        if not isinstance(connector_type, str) or not connector_type:
            raise ValueError("Invalid connector type specified (arg #2)")

        self._id = connector_id
        self._type = connector_type
        self._state = ConnectorState.INIT
        self._logger = logger.bind(component=f"con:{connector_type}:{connector_id}")

    @property
    def id(self) -> str:
        return self._id

    @property
    def type(self) -> str:
        return self._type

    @property
    def state(self) -> ConnectorState:
        return self._state

    def _configure(self) -> None:
        """Pre-start configuration hook. Override in subclasses if needed."""
        pass

    def _start(self) -> None:
        raise NotImplementedError("The _start() method has not been implemented.")

    def _stop(self) -> None:
        raise NotImplementedError("The _stop() method has not been implemented.")

    def start(self) -> None:
        """Configure and start the connector.

        Raises:
            ConnectorStateError: If the connector is not in the init state
        """
        if self._state != ConnectorState.INIT:
            raise ConnectorStateError(f"Connector cannot be started when in [{self._state.value}] state")

        self._state = ConnectorState.STARTING_UP
        try:
            self._configure()
            self._logger.info("Connector configuration complete")
            self._logger.info("Starting connector")
            self._start()
        except Exception as e:
            self._logger.error(f"Error starting connector: {e}")
            self._state = ConnectorState.ERROR
            raise

        self._logger.info("Connector started successfully")
        self._state = ConnectorState.STARTED

    def stop(self) -> None:
        """Stop the connector and release its resources.

        Raises:
            ConnectorStateError: If the connector is not started
        """
        if self._state != ConnectorState.STARTED:
            raise ConnectorStateError(f"Connector cannot be stopped when in [{self._state.value}] state")

        self._logger.info("Stopping connector")
        self._state = ConnectorState.SHUTTING_DOWN
        try:
            self._stop()
        except Exception as e:
            self._logger.error(f"Error stopping connector: {e}")
            self._state = ConnectorState.ERROR
            raise

        self._logger.info("Connector stopped successfully")
        self._state = ConnectorState.STOPPED
