"""Strategy rule models: conditions, actions and the rules pairing them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


class RangeDirection(str, Enum):
    UP = "up"
    DOWN = "down"
    BOTH = "both"


class RangeBounds(str, Enum):
    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"
    LEFT_INCLUSIVE = "left_inclusive"
    RIGHT_INCLUSIVE = "right_inclusive"

    def contains(self, value: float, lower: float, upper: float) -> bool:
        if self == RangeBounds.INCLUSIVE:
            return lower <= value <= upper
        if self == RangeBounds.EXCLUSIVE:
            return lower < value < upper
        if self == RangeBounds.LEFT_INCLUSIVE:
            return lower <= value < upper
        return lower < value <= upper


class PriceField(str, Enum):
    CLOSE = "close"
    HIGH = "high"
    LOW = "low"


# Conditions


@dataclass(frozen=True)
class Always:
    pass


@dataclass(frozen=True)
class ClosePriceChange:
    threshold_percent: float
    direction: Direction = Direction.UP

    def __post_init__(self) -> None:
        _require_non_negative("threshold_percent", self.threshold_percent)


@dataclass(frozen=True)
class HighPriceChange:
    threshold_percent: float
    direction: Direction = Direction.UP

    def __post_init__(self) -> None:
        _require_non_negative("threshold_percent", self.threshold_percent)


@dataclass(frozen=True)
class LowPriceChange:
    threshold_percent: float
    direction: Direction = Direction.UP

    def __post_init__(self) -> None:
        _require_non_negative("threshold_percent", self.threshold_percent)


@dataclass(frozen=True)
class PriceChangeRange:
    min_percent: float
    max_percent: float
    field: PriceField = PriceField.CLOSE
    direction: RangeDirection = RangeDirection.UP
    bounds: RangeBounds = RangeBounds.INCLUSIVE


@dataclass(frozen=True)
class PriceValueRange:
    min_price: float
    max_price: float
    bounds: RangeBounds = RangeBounds.INCLUSIVE


ConditionSpec = Union[
    Always,
    ClosePriceChange,
    HighPriceChange,
    LowPriceChange,
    PriceChangeRange,
    PriceValueRange,
]


# Actions


@dataclass(frozen=True)
class BuyPercentCash:
    percent: float

    def __post_init__(self) -> None:
        _require_percent("percent", self.percent)


@dataclass(frozen=True)
class BuyFixedAmount:
    amount: float


@dataclass(frozen=True)
class BuyShares:
    count: int

    def __post_init__(self) -> None:
        if self.count <= 0:
            raise ValueError("count must be a positive share count")


@dataclass(frozen=True)
class BuyFormulaAmount:
    formula: str


@dataclass(frozen=True)
class BuyFormulaShares:
    formula: str


@dataclass(frozen=True)
class BuyFormulaPercent:
    formula: str


@dataclass(frozen=True)
class SellPercentShares:
    percent: float

    def __post_init__(self) -> None:
        _require_percent("percent", self.percent)


@dataclass(frozen=True)
class SellFixedAmount:
    amount: float


@dataclass(frozen=True)
class SellShares:
    count: int

    def __post_init__(self) -> None:
        if self.count <= 0:
            raise ValueError("count must be a positive share count")


@dataclass(frozen=True)
class SellFormulaAmount:
    formula: str


@dataclass(frozen=True)
class SellFormulaShares:
    formula: str


@dataclass(frozen=True)
class SellFormulaPercent:
    formula: str


@dataclass(frozen=True)
class SellAll:
    pass


@dataclass(frozen=True)
class Hold:
    pass


ActionSpec = Union[
    BuyPercentCash,
    BuyFixedAmount,
    BuyShares,
    BuyFormulaAmount,
    BuyFormulaShares,
    BuyFormulaPercent,
    SellPercentShares,
    SellFixedAmount,
    SellShares,
    SellFormulaAmount,
    SellFormulaShares,
    SellFormulaPercent,
    SellAll,
    Hold,
]

FORMULA_ACTIONS = (
    BuyFormulaAmount,
    BuyFormulaShares,
    BuyFormulaPercent,
    SellFormulaAmount,
    SellFormulaShares,
    SellFormulaPercent,
)


@dataclass(frozen=True)
class Rule:
    condition: ConditionSpec
    action: ActionSpec
    name: str = ""
    enabled: bool = True


def _require_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


def _require_percent(name: str, value: float) -> None:
    if not 0 <= value <= 100:
        raise ValueError(f"{name} must be between 0 and 100")
