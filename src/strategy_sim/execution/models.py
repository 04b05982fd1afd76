"""Portfolio state and trade records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass(frozen=True)
class Portfolio:
    cash: float
    shares: int = 0

    def __post_init__(self) -> None:
        if self.cash < 0:
            raise ValueError(f"cash must be non-negative, got {self.cash}")
        if self.shares < 0:
            raise ValueError(f"shares must be non-negative, got {self.shares}")

    def value_at(self, price: float) -> float:
        return self.cash + self.shares * price


@dataclass(frozen=True)
class Trade:
    side: TradeSide
    quantity: int
    price: float
    commission: float
    total: float
    date: Optional[date] = None


@dataclass(frozen=True)
class ActionResult:
    portfolio: Portfolio
    trade: Optional[Trade]
    reason: str
    error_code: Optional[str] = None

    @property
    def executed(self) -> bool:
        return self.trade is not None
