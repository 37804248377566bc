"""HTTP push connector for delivering buffered readings to the ingest API.

Each poll cycle drains the sample buffer into a JSON array of node readings
and posts it to ``<url>/api/nodes``. The request runs on a worker thread; its
outcome is only logged. There is no retry, and a failed send never restores
the drained samples.
"""

from __future__ import annotations

import json
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, List, Optional
from urllib.error import HTTPError
from urllib.request import Request, urlopen

from ..buffer import SampleBuffer
from ..config.settings import ConnectorConfig
from ..core.samples import NodeReading, build_node_readings
from .base import Connector, ConnectorState


def _json_default(value: Any) -> Any:
    """Fallback encoder for reading values json cannot handle natively."""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


@dataclass
class PushResponse:
    """Outcome of a completed POST."""

    status: int
    body: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class HttpPushConnector(Connector):
    """Cloud connector that posts buffered readings over HTTP."""

    def __init__(self, connector_id: str, config: ConnectorConfig, buffer: SampleBuffer):
        """Initialize the connector.

        Args:
            connector_id: Unique id for the connector
            config: Static connector configuration
            buffer: Buffer this connector drains on every cycle
        """
        super().__init__(connector_id, "cloud")
        self.config = config
        self.buffer = buffer

        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()
        self._stats_lock = threading.Lock()

        # Statistics
        self._total_cycles = 0
        self._total_payloads_dispatched = 0
        self._total_payloads_sent = 0
        self._total_payloads_failed = 0
        self._total_readings_sent = 0
        self._in_flight = 0
        self._last_successful_send: Optional[datetime] = None
        self._last_error: Optional[str] = None

    def _start(self) -> None:
        self._get_executor()

    def _stop(self) -> None:
        with self._executor_lock:
            executor, self._executor = self._executor, None

        if executor is not None:
            # Let in-flight sends finish so their outcome gets logged
            executor.shutdown(wait=True)

    def process(self) -> Optional[Future]:
        """Run one push cycle.

        Returns:
            Future for the dispatched request, or None if there was nothing
            to send
        """
        with self._stats_lock:
            self._total_cycles += 1

        payload = self.prepare_payload()
        if payload is None:
            self._logger.info("No data to send")
            return None

        try:
            request = self._build_request(payload)
        except (TypeError, ValueError) as e:
            with self._stats_lock:
                self._total_payloads_failed += 1
                self._last_error = f"Serialization error: {e}"
            self._logger.error(f"Error serializing payload, dropping [{len(payload)}] node readings: {e}")
            return None

        self._logger.info(f"Sending [{len(payload)}] node readings to the cloud")
        self._logger.debug(f"Payload: {request.data.decode('utf-8')}")

        with self._stats_lock:
            self._total_payloads_dispatched += 1
            self._in_flight += 1

        try:
            future = self._get_executor().submit(self._post, request)
        except RuntimeError as e:
            # Connector is shutting down or already stopped
            with self._stats_lock:
                self._in_flight -= 1
                self._total_payloads_failed += 1
                self._last_error = f"Dispatch error: {e}"
            self._logger.error(f"Error dispatching data to server: {e}")
            return None

        reading_count = sum(len(reading.sensors) for reading in payload)
        future.add_done_callback(lambda f: self._handle_completion(f, reading_count))
        return future

    def prepare_payload(self) -> Optional[List[NodeReading]]:
        """Drain the buffer and build the payload for this cycle.

        The buffer is always left empty, even when nothing is returned.

        Returns:
            Node readings in buffer order, or None if no sample carried any
            sensor values
        """
        samples = self.buffer.drain_all()
        return build_node_readings(samples, self.config.mac)

    def get_stats(self) -> Dict[str, Any]:
        """Get connector statistics.

        Returns:
            Dictionary with connector statistics
        """
        with self._stats_lock:
            completed = self._total_payloads_sent + self._total_payloads_failed
            return {
                "state": self.state.value,
                "total_cycles": self._total_cycles,
                "total_payloads_dispatched": self._total_payloads_dispatched,
                "total_payloads_sent": self._total_payloads_sent,
                "total_payloads_failed": self._total_payloads_failed,
                "total_readings_sent": self._total_readings_sent,
                "in_flight": self._in_flight,
                "success_rate": self._total_payloads_sent / max(1, completed),
                "last_successful_send": self._last_successful_send.isoformat() if self._last_successful_send else None,
                "last_error": self._last_error,
            }

    def _get_executor(self) -> ThreadPoolExecutor:
        """Return the send pool, creating it on first use.

        Raises:
            RuntimeError: If the connector is shutting down or stopped
        """
        with self._executor_lock:
            if self.state in (ConnectorState.SHUTTING_DOWN, ConnectorState.STOPPED):
                raise RuntimeError(f"Connector is {self.state.value}, cannot dispatch")
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self.config.max_workers,
                    thread_name_prefix=f"push-{self.id}",
                )
            return self._executor

    def _build_request(self, payload: List[NodeReading]) -> Request:
        """Build the POST request for a payload."""
        body = json.dumps([reading.to_dict() for reading in payload], allow_nan=False, default=_json_default)
        request = Request(self.config.nodes_url, data=body.encode("utf-8"), method="POST")

        # Configured headers win, including over the content type
        request.add_header("Content-Type", "application/json")
        for name, value in self.config.headers.items():
            request.add_header(name, value)

        return request

    def _post(self, request: Request) -> PushResponse:
        """Send a single HTTP request.

        Non-2xx statuses are returned as responses; transport errors propagate
        to the future.
        """
        try:
            with urlopen(request, timeout=self.config.timeout_seconds) as response:
                return PushResponse(status=response.status, body=response.read().decode("utf-8", errors="replace"))
        except HTTPError as e:
            body = e.read().decode("utf-8", errors="replace") if e.fp is not None else ""
            return PushResponse(status=e.code, body=body)

    def _handle_completion(self, future: Future, reading_count: int) -> None:
        """Log the outcome of a finished send."""
        error = future.exception()
        response = future.result() if error is None else None

        with self._stats_lock:
            self._in_flight -= 1
            if response is not None and response.ok:
                self._total_payloads_sent += 1
                self._total_readings_sent += reading_count
                self._last_successful_send = datetime.now()
                self._last_error = None
            else:
                self._total_payloads_failed += 1
                if response is not None:
                    self._last_error = f"HTTP {response.status}: {response.body}"
                else:
                    self._last_error = f"Network error: {error}"

        if response is None:
            self._logger.error(f"Error posting data to server. Network error: {error}")
        elif response.ok:
            self._logger.info("Data successfully posted to the cloud")
        else:
            self._logger.error(f"Error posting data to server. Status: [{response.status}]. Body: {response.body}")
