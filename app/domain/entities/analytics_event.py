from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class AnalyticsEvent:
    event: str
    category: str
    action: str
    label: str | None = None
    value: float | None = None
    custom_data: dict[str, Any] = field(default_factory=dict)
