"""Apply strategy actions to a portfolio."""

from __future__ import annotations

import math
from typing import Optional

from strategy_sim.errors import DataIntegrityError
from strategy_sim.execution.models import ActionResult, Portfolio, Trade, TradeSide
from strategy_sim.formula import FormulaError, evaluate_formula
from strategy_sim.rules.models import (
    ActionSpec,
    BuyFixedAmount,
    BuyFormulaAmount,
    BuyFormulaPercent,
    BuyFormulaShares,
    BuyPercentCash,
    BuyShares,
    Hold,
    SellAll,
    SellFixedAmount,
    SellFormulaAmount,
    SellFormulaPercent,
    SellFormulaShares,
    SellPercentShares,
    SellShares,
)

COMMISSION_RATE = 0.0025


class ActionExecutor:
    """Turns an action spec into a new portfolio and at most one trade.

    Infeasible actions (not enough cash or shares, a quantity that floors to
    zero, a formula that fails or yields a non-positive value) leave the
    portfolio untouched and produce no trade.
    """

    def __init__(self, commission_rate: float = COMMISSION_RATE) -> None:
        if not 0 <= commission_rate < 1:
            raise ValueError(f"commission_rate must be in [0, 1), got {commission_rate}")
        self.commission_rate = commission_rate

    def execute(
        self,
        spec: ActionSpec,
        price: float,
        portfolio: Portfolio,
        derived_n: float = 0.0,
    ) -> ActionResult:
        if price <= 0:
            raise DataIntegrityError(
                DataIntegrityError.NON_POSITIVE_PRICE,
                f"Cannot trade at non-positive price {price}",
            )

        if isinstance(spec, Hold):
            return _skip(portfolio, "Hold")
        if isinstance(spec, BuyPercentCash):
            return self._buy_notional(portfolio.cash * spec.percent / 100, price, portfolio)
        if isinstance(spec, BuyFixedAmount):
            return self._buy_notional(spec.amount, price, portfolio)
        if isinstance(spec, BuyShares):
            return self._buy_quantity(spec.count, price, portfolio)
        if isinstance(spec, SellAll):
            return self._sell_quantity(portfolio.shares, price, portfolio)
        if isinstance(spec, SellPercentShares):
            return self._sell_quantity(math.floor(portfolio.shares * spec.percent / 100), price, portfolio)
        if isinstance(spec, SellFixedAmount):
            return self._sell_quantity(math.floor(spec.amount / price), price, portfolio)
        if isinstance(spec, SellShares):
            return self._sell_quantity(spec.count, price, portfolio)

        if isinstance(
            spec,
            (
                BuyFormulaAmount,
                BuyFormulaShares,
                BuyFormulaPercent,
                SellFormulaAmount,
                SellFormulaShares,
                SellFormulaPercent,
            ),
        ):
            return self._execute_formula(spec, price, portfolio, derived_n)

        # Unknown action kinds are treated as a hold.
        return _skip(portfolio, f"Unsupported action {type(spec).__name__}")

    def _execute_formula(
        self,
        spec: ActionSpec,
        price: float,
        portfolio: Portfolio,
        derived_n: float,
    ) -> ActionResult:
        try:
            value = evaluate_formula(spec.formula, derived_n)
        except FormulaError as exc:
            return _skip(portfolio, f"Formula error: {exc}", error_code=exc.code)

        if not math.isfinite(value) or value <= 0:
            return _skip(portfolio, f"Formula result {value} is not a positive amount")

        if isinstance(spec, BuyFormulaAmount):
            return self._buy_notional(value, price, portfolio)
        if isinstance(spec, BuyFormulaShares):
            return self._buy_quantity(math.floor(value), price, portfolio)
        if isinstance(spec, BuyFormulaPercent):
            return self._buy_notional(portfolio.cash * _clamp_percent(value) / 100, price, portfolio)
        if isinstance(spec, SellFormulaAmount):
            return self._sell_quantity(math.floor(value / price), price, portfolio)
        if isinstance(spec, SellFormulaShares):
            return self._sell_quantity(math.floor(value), price, portfolio)
        return self._sell_quantity(
            math.floor(portfolio.shares * _clamp_percent(value) / 100),
            price,
            portfolio,
        )

    def _buy_notional(self, notional: float, price: float, portfolio: Portfolio) -> ActionResult:
        commission = notional * self.commission_rate
        quantity = math.floor((notional - commission) / price) if notional > 0 else 0
        if quantity <= 0:
            return _skip(portfolio, "Amount too small for one share")
        gross = quantity * price + commission
        if gross > portfolio.cash:
            return _skip(portfolio, "Insufficient cash")
        return self._fill_buy(quantity, price, commission, gross, portfolio)

    def _buy_quantity(self, quantity: int, price: float, portfolio: Portfolio) -> ActionResult:
        if quantity <= 0:
            return _skip(portfolio, "Non-positive share count")
        notional = quantity * price
        commission = notional * self.commission_rate
        gross = notional + commission
        if gross > portfolio.cash:
            return _skip(portfolio, "Insufficient cash")
        return self._fill_buy(quantity, price, commission, gross, portfolio)

    def _sell_quantity(self, quantity: int, price: float, portfolio: Portfolio) -> ActionResult:
        if quantity <= 0:
            return _skip(portfolio, "No shares to sell")
        if quantity > portfolio.shares:
            return _skip(portfolio, "Insufficient shares")
        notional = quantity * price
        commission = notional * self.commission_rate
        proceeds = notional - commission
        trade = Trade(
            side=TradeSide.SELL,
            quantity=quantity,
            price=price,
            commission=commission,
            total=proceeds,
        )
        updated = Portfolio(cash=portfolio.cash + proceeds, shares=portfolio.shares - quantity)
        return ActionResult(updated, trade, "Sold")

    @staticmethod
    def _fill_buy(
        quantity: int,
        price: float,
        commission: float,
        gross: float,
        portfolio: Portfolio,
    ) -> ActionResult:
        trade = Trade(
            side=TradeSide.BUY,
            quantity=quantity,
            price=price,
            commission=commission,
            total=gross,
        )
        updated = Portfolio(cash=portfolio.cash - gross, shares=portfolio.shares + quantity)
        return ActionResult(updated, trade, "Bought")


def execute_action(
    spec: ActionSpec,
    price: float,
    portfolio: Portfolio,
    derived_n: float = 0.0,
    commission_rate: float = COMMISSION_RATE,
) -> ActionResult:
    return ActionExecutor(commission_rate).execute(spec, price, portfolio, derived_n)


def _clamp_percent(value: float) -> float:
    return min(100.0, max(0.0, value))


def _skip(portfolio: Portfolio, reason: str, error_code: Optional[str] = None) -> ActionResult:
    return ActionResult(portfolio, None, reason, error_code)
