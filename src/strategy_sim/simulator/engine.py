"""Replay a price series against an ordered list of strategy rules."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Iterable, Optional, Sequence, Union

from strategy_sim.data.models import PriceObservation
from strategy_sim.errors import DataIntegrityError
from strategy_sim.execution.executor import COMMISSION_RATE, ActionExecutor
from strategy_sim.execution.models import Portfolio, Trade
from strategy_sim.rules.conditions import evaluate_condition
from strategy_sim.rules.models import ActionSpec, ConditionSpec, Rule
from strategy_sim.simulator.models import (
    ProgressStatus,
    SimulationProgress,
    SimulationResult,
    ValuationPoint,
)

RuleInput = Union[Rule, tuple[ConditionSpec, ActionSpec]]
ProgressCallback = Callable[[SimulationProgress], None]


def check_price_series(prices: Sequence[PriceObservation]) -> None:
    if not prices:
        raise DataIntegrityError(DataIntegrityError.EMPTY_PRICES, "Price series is empty")
    for previous, current in zip(prices, prices[1:]):
        if current.date <= previous.date:
            raise DataIntegrityError(
                DataIntegrityError.NON_MONOTONIC_DATES,
                f"Price dates must strictly increase: {current.date} follows {previous.date}",
            )


class StrategySimulator:
    """Runs one strategy over one price series.

    Rules are evaluated in declared order on every step after the first
    observation. A matching rule acts on the portfolio as left by the rules
    before it in the same step, so sell-then-buy chains work within a single
    day. Actions fill at the step's close.
    """

    def __init__(
        self,
        commission_rate: float = COMMISSION_RATE,
        audit_log: Optional[object] = None,
        monitor: Optional[object] = None,
    ) -> None:
        self.executor = ActionExecutor(commission_rate)
        self._audit_log = audit_log
        self._monitor = monitor

    def run(
        self,
        prices: Iterable[PriceObservation],
        rules: Iterable[RuleInput],
        initial_portfolio: Portfolio,
        progress: Optional[ProgressCallback] = None,
    ) -> SimulationResult:
        series = list(prices)
        rule_list = [_as_rule(item) for item in rules]
        try:
            check_price_series(series)
            return self._run(series, rule_list, initial_portfolio, progress)
        except DataIntegrityError as exc:
            self._log("simulation_failed", {"code": exc.code, "message": exc.message})
            if self._monitor is not None:
                self._monitor.run_failed(f"{exc.code}: {exc.message}")
            raise

    def _run(
        self,
        series: list[PriceObservation],
        rules: list[Rule],
        initial_portfolio: Portfolio,
        progress: Optional[ProgressCallback],
    ) -> SimulationResult:
        total_steps = len(series) - 1
        _report(progress, 0, total_steps, series[0], ProgressStatus.PREPARING)
        self._log(
            "simulation_start",
            {
                "observations": len(series),
                "rules": len(rules),
                "cash": initial_portfolio.cash,
                "shares": initial_portfolio.shares,
                "commission_rate": self.executor.commission_rate,
            },
        )

        portfolio = initial_portfolio
        trades: list[Trade] = []
        valuation: list[ValuationPoint] = []

        for step in range(1, len(series)):
            current = series[step]
            previous = series[step - 1]

            for position, rule in enumerate(rules):
                if not rule.enabled:
                    continue
                condition = evaluate_condition(rule.condition, current, previous)
                if not condition.matched:
                    continue

                outcome = self.executor.execute(rule.action, current.close, portfolio, condition.derived_n)
                portfolio = outcome.portfolio
                label = rule.name or f"rule-{position + 1}"
                if outcome.trade is not None:
                    trade = replace(outcome.trade, date=current.date)
                    trades.append(trade)
                    self._log(
                        "trade",
                        {
                            "rule": label,
                            "date": current.date.isoformat(),
                            "side": trade.side.value,
                            "quantity": trade.quantity,
                            "price": trade.price,
                            "commission": trade.commission,
                            "total": trade.total,
                        },
                    )
                elif outcome.error_code is not None:
                    self._log(
                        "action_skipped",
                        {
                            "rule": label,
                            "date": current.date.isoformat(),
                            "code": outcome.error_code,
                            "reason": outcome.reason,
                        },
                    )
                    if self._monitor is not None:
                        self._monitor.formula_error(label, outcome.reason)

            valuation.append(
                ValuationPoint(
                    date=current.date,
                    cash=portfolio.cash,
                    shares=portfolio.shares,
                    close=current.close,
                    total_value=portfolio.value_at(current.close),
                )
            )
            _report(progress, step, total_steps, current, ProgressStatus.RUNNING)

        result = SimulationResult(
            initial_portfolio=initial_portfolio,
            initial_value=initial_portfolio.value_at(series[0].close),
            final_portfolio=portfolio,
            trades=trades,
            valuation=valuation,
        )
        _report(progress, total_steps, total_steps, series[-1], ProgressStatus.COMPLETED)
        self._log(
            "simulation_complete",
            {
                "trades": len(trades),
                "final_value": result.final_value,
                "total_return_pct": result.total_return_pct,
            },
        )
        if self._monitor is not None:
            self._monitor.run_completed(f"{len(trades)} trades, final value {result.final_value:.2f}")
        return result

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)


def run_simulation(
    prices: Iterable[PriceObservation],
    rules: Iterable[RuleInput],
    initial_portfolio: Portfolio,
    commission_rate: float = COMMISSION_RATE,
) -> SimulationResult:
    return StrategySimulator(commission_rate).run(prices, rules, initial_portfolio)


def _as_rule(item: RuleInput) -> Rule:
    if isinstance(item, Rule):
        return item
    condition, action = item
    return Rule(condition=condition, action=action)


def _report(
    progress: Optional[ProgressCallback],
    current: int,
    total: int,
    observation: PriceObservation,
    status: ProgressStatus,
) -> None:
    if progress is None:
        return
    progress(SimulationProgress(current=current, total=total, date=observation.date, status=status))
