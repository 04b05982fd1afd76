"""Simulation data structures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum

from strategy_sim.execution.models import Portfolio, Trade


class ProgressStatus(str, Enum):
    PREPARING = "preparing"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SimulationProgress:
    current: int
    total: int
    date: date
    status: ProgressStatus


@dataclass(frozen=True)
class ValuationPoint:
    date: date
    cash: float
    shares: int
    close: float
    total_value: float


@dataclass(frozen=True)
class SimulationResult:
    initial_portfolio: Portfolio
    initial_value: float
    final_portfolio: Portfolio
    trades: list[Trade]
    valuation: list[ValuationPoint]

    @property
    def final_value(self) -> float:
        if not self.valuation:
            return self.initial_value
        return self.valuation[-1].total_value

    @property
    def total_return(self) -> float:
        return self.final_value - self.initial_value

    @property
    def total_return_pct(self) -> float:
        if self.initial_value <= 0:
            return 0.0
        return self.total_return / self.initial_value * 100
