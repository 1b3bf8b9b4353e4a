from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFile:
    filename: str
    content_type: str
    content: bytes


class FormRelayPort(ABC):
    @abstractmethod
    def submit(self, form_name: str, fields: dict[str, str], files: list[UploadedFile] | None = None) -> None:
        """Forward a form submission. Raises FormRelayError when not accepted."""
        raise NotImplementedError

    def close(self) -> None:
        """Release any connections held by the relay."""
        return None
