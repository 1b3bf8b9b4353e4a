from abc import ABC, abstractmethod
from typing import Any


class AnalyticsTransportPort(ABC):
    @abstractmethod
    def send(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release any connections held by the transport."""
        return None


class AnalyticsPublisherPort(ABC):
    @abstractmethod
    def publish(self, payload: dict[str, Any]) -> bool:
        """Hand an event to the delivery queue. Returns False if it was dropped."""
        raise NotImplementedError
