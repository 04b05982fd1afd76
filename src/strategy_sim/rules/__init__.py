"""Strategy rules: condition and action specs and condition evaluation."""

from strategy_sim.rules.conditions import ConditionResult, evaluate_condition, percent_change
from strategy_sim.rules.models import (
    FORMULA_ACTIONS,
    ActionSpec,
    Always,
    BuyFixedAmount,
    BuyFormulaAmount,
    BuyFormulaPercent,
    BuyFormulaShares,
    BuyPercentCash,
    BuyShares,
    ClosePriceChange,
    ConditionSpec,
    Direction,
    HighPriceChange,
    Hold,
    LowPriceChange,
    PriceChangeRange,
    PriceField,
    PriceValueRange,
    RangeBounds,
    RangeDirection,
    Rule,
    SellAll,
    SellFixedAmount,
    SellFormulaAmount,
    SellFormulaPercent,
    SellFormulaShares,
    SellPercentShares,
    SellShares,
)

__all__ = [
    "ActionSpec",
    "Always",
    "BuyFixedAmount",
    "BuyFormulaAmount",
    "BuyFormulaPercent",
    "BuyFormulaShares",
    "BuyPercentCash",
    "BuyShares",
    "ClosePriceChange",
    "ConditionResult",
    "ConditionSpec",
    "Direction",
    "FORMULA_ACTIONS",
    "HighPriceChange",
    "Hold",
    "LowPriceChange",
    "PriceChangeRange",
    "PriceField",
    "PriceValueRange",
    "RangeBounds",
    "RangeDirection",
    "Rule",
    "SellAll",
    "SellFixedAmount",
    "SellFormulaAmount",
    "SellFormulaPercent",
    "SellFormulaShares",
    "SellPercentShares",
    "SellShares",
    "evaluate_condition",
    "percent_change",
]
