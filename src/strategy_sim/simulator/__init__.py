"""Simulation loop and results."""

from strategy_sim.simulator.engine import StrategySimulator, check_price_series, run_simulation
from strategy_sim.simulator.models import (
    ProgressStatus,
    SimulationProgress,
    SimulationResult,
    ValuationPoint,
)

__all__ = [
    "ProgressStatus",
    "SimulationProgress",
    "SimulationResult",
    "StrategySimulator",
    "ValuationPoint",
    "check_price_series",
    "run_simulation",
]
