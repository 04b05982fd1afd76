"""Market data records consumed by the simulator."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class PriceObservation:
    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0

    def __post_init__(self) -> None:
        if self.volume < 0:
            raise ValueError("volume must be non-negative")

    def value(self, field: str) -> float:
        return float(getattr(self, field))
