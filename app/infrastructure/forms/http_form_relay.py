from __future__ import annotations

import logging

import httpx

from app.application.exceptions import FormRelayError
from app.application.ports.form_relay import FormRelayPort, UploadedFile


class HttpFormRelay(FormRelayPort):
    """Posts submissions to a Netlify-style form endpoint."""

    def __init__(self, endpoint: str, timeout: float = 10.0) -> None:
        self._endpoint = endpoint
        self._client = httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    def submit(self, form_name: str, fields: dict[str, str], files: list[UploadedFile] | None = None) -> None:
        data = {"form-name": form_name, **fields}
        try:
            if files:
                multipart = [
                    ("file", (f.filename, f.content, f.content_type)) for f in files
                ]
                resp = self._client.post(self._endpoint, data=data, files=multipart)
            else:
                resp = self._client.post(self._endpoint, data=data)
        except httpx.HTTPError as e:
            self._logger.error("Form relay request failed", extra={"form_name": form_name, "error": str(e)})
            raise FormRelayError("Form submission failed") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Form relay rejected submission",
                extra={"form_name": form_name, "status": resp.status_code},
            )
            raise FormRelayError("Form submission failed")

    def close(self) -> None:
        self._client.close()
