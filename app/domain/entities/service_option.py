from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ServiceOption:
    id: str
    name: str
    price: int  # whole pounds
    description: str
    features: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class PricedItem:
    name: str
    price: int
    category: str

    @property
    def key(self) -> str:
        return f"{self.name}_{self.price}"
