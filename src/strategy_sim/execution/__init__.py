"""Action execution against a portfolio."""

from strategy_sim.execution.executor import COMMISSION_RATE, ActionExecutor, execute_action
from strategy_sim.execution.models import ActionResult, Portfolio, Trade, TradeSide

__all__ = [
    "ActionExecutor",
    "ActionResult",
    "COMMISSION_RATE",
    "Portfolio",
    "Trade",
    "TradeSide",
    "execute_action",
]
