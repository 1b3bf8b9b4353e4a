from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PostcodeValidationResult:
    is_valid: bool
    message: str
    type: str  # "success", "error", "info"
    area: str | None = None
