from __future__ import annotations

import logging
from collections import deque
from typing import Any

from app.application.ports.analytics_transport import AnalyticsTransportPort


class LoggingAnalyticsTransport(AnalyticsTransportPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.sent: deque[dict[str, Any]] = deque(maxlen=500)

    def send(self, payload: dict[str, Any]) -> None:
        self.sent.append(payload)
        self._logger.info(
            "Analytics event",
            extra={"event_type": payload.get("event"), "label": payload.get("label")},
        )
