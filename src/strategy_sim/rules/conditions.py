"""Condition evaluation against a pair of adjacent price observations."""

from __future__ import annotations

from dataclasses import dataclass

from strategy_sim.data.models import PriceObservation
from strategy_sim.errors import DataIntegrityError
from strategy_sim.rules.models import (
    Always,
    ClosePriceChange,
    ConditionSpec,
    Direction,
    HighPriceChange,
    LowPriceChange,
    PriceChangeRange,
    PriceField,
    PriceValueRange,
    RangeDirection,
)


@dataclass(frozen=True)
class ConditionResult:
    matched: bool
    derived_n: float


def percent_change(current: PriceObservation, previous: PriceObservation, field: PriceField) -> float:
    base = previous.value(field.value)
    if base <= 0:
        raise DataIntegrityError(
            DataIntegrityError.NON_POSITIVE_PRICE,
            f"Non-positive {field.value} price {base} on {previous.date}",
        )
    return (current.value(field.value) - base) / base * 100


def evaluate_condition(
    spec: ConditionSpec,
    current: PriceObservation,
    previous: PriceObservation,
) -> ConditionResult:
    if isinstance(spec, Always):
        return ConditionResult(True, 0.0)
    if isinstance(spec, ClosePriceChange):
        return _threshold_change(spec.threshold_percent, spec.direction, PriceField.CLOSE, current, previous)
    if isinstance(spec, HighPriceChange):
        return _threshold_change(spec.threshold_percent, spec.direction, PriceField.HIGH, current, previous)
    if isinstance(spec, LowPriceChange):
        return _threshold_change(spec.threshold_percent, spec.direction, PriceField.LOW, current, previous)
    if isinstance(spec, PriceChangeRange):
        pct = percent_change(current, previous, spec.field)
        if spec.direction == RangeDirection.DOWN:
            adjusted = -pct
        elif spec.direction == RangeDirection.BOTH:
            adjusted = abs(pct)
        else:
            adjusted = pct
        return ConditionResult(spec.bounds.contains(adjusted, spec.min_percent, spec.max_percent), pct)
    if isinstance(spec, PriceValueRange):
        pct = percent_change(current, previous, PriceField.CLOSE)
        return ConditionResult(spec.bounds.contains(current.close, spec.min_price, spec.max_price), pct)
    # Unknown condition kinds never match.
    return ConditionResult(False, 0.0)


def _threshold_change(
    threshold: float,
    direction: Direction,
    field: PriceField,
    current: PriceObservation,
    previous: PriceObservation,
) -> ConditionResult:
    pct = percent_change(current, previous, field)
    if direction == Direction.UP:
        matched = pct >= threshold
    else:
        matched = pct <= -threshold
    return ConditionResult(matched, pct)
