from __future__ import annotations

import logging

from app.application.exceptions import FormRelayError
from app.application.ports.form_relay import FormRelayPort, UploadedFile


class MockFormRelay(FormRelayPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self.submissions: list[tuple[str, dict[str, str], list[UploadedFile]]] = []
        self.fail = False

    def submit(self, form_name: str, fields: dict[str, str], files: list[UploadedFile] | None = None) -> None:
        if self.fail:
            raise FormRelayError("Form submission failed")
        self.submissions.append((form_name, dict(fields), list(files or [])))
        self._logger.info(
            "Mock form relay", extra={"form_name": form_name, "file_count": len(files or [])}
        )
