from __future__ import annotations

from typing import Any

import httpx

from app.application.ports.analytics_transport import AnalyticsTransportPort


class HttpAnalyticsTransport(AnalyticsTransportPort):
    def __init__(self, endpoint: str, timeout: float = 10.0) -> None:
        self._endpoint = endpoint
        self._client = httpx.Client(timeout=timeout)

    def send(self, payload: dict[str, Any]) -> None:
        resp = self._client.post(self._endpoint, json=payload)
        resp.raise_for_status()

    def close(self) -> None:
        self._client.close()
