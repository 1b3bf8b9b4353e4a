from __future__ import annotations

import logging
import queue
import threading
from typing import Any

from app.application.ports.analytics_transport import AnalyticsPublisherPort, AnalyticsTransportPort


class AnalyticsQueue(AnalyticsPublisherPort):
    """Bounded best-effort delivery: drop when full, drop on transport failure."""

    def __init__(self, transport: AnalyticsTransportPort, maxsize: int = 1000) -> None:
        self._transport = transport
        self._queue: queue.Queue[dict[str, Any] | None] = queue.Queue(maxsize=maxsize)
        self._worker: threading.Thread | None = None
        self._start_lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        self.dropped = 0
        self.delivered = 0

    def start(self) -> None:
        with self._start_lock:
            if self._worker is not None and self._worker.is_alive():
                return
            self._worker = threading.Thread(target=self._run, name="analytics-queue", daemon=True)
            self._worker.start()

    def stop(self, timeout: float = 2.0) -> None:
        worker = self._worker
        if worker is None:
            return
        try:
            self._queue.put(None, timeout=timeout)
        except queue.Full:
            self._logger.warning("Analytics queue full on shutdown; worker left running")
            return
        worker.join(timeout)
        self._worker = None

    def close(self, timeout: float = 2.0) -> None:
        """Stop the worker, then release the transport."""
        self.stop(timeout)
        self._transport.close()

    def publish(self, payload: dict[str, Any]) -> bool:
        try:
            self._queue.put_nowait(payload)
        except queue.Full:
            self.dropped += 1
            return False
        return True

    def flush(self, timeout: float | None = None) -> None:
        """Deliver everything queued so far on the calling thread."""
        while True:
            try:
                payload = self._queue.get(timeout=timeout) if timeout else self._queue.get_nowait()
            except queue.Empty:
                return
            try:
                if payload is not None:
                    self._deliver(payload)
            finally:
                self._queue.task_done()

    def _run(self) -> None:
        while True:
            payload = self._queue.get()
            try:
                if payload is None:
                    return
                self._deliver(payload)
            finally:
                self._queue.task_done()

    def _deliver(self, payload: dict[str, Any]) -> None:
        try:
            self._transport.send(payload)
            self.delivered += 1
        except Exception as e:
            self.dropped += 1
            self._logger.warning(
                "Analytics delivery failed",
                extra={"event_type": payload.get("event"), "error": str(e)},
            )
