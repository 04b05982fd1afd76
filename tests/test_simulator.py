from datetime import date, timedelta

import pytest

from strategy_sim.data import PriceObservation
from strategy_sim.errors import DataIntegrityError
from strategy_sim.execution import Portfolio, TradeSide
from strategy_sim.rules import (
    Always,
    BuyFormulaAmount,
    BuyPercentCash,
    BuyShares,
    ClosePriceChange,
    Direction,
    Hold,
    Rule,
    SellAll,
)
from strategy_sim.simulator import ProgressStatus, StrategySimulator, run_simulation

CLOSES = [1000, 1050, 1100, 1045, 990]


def _series(closes, start=date(2024, 1, 1)):
    return [
        PriceObservation(
            date=start + timedelta(days=offset),
            open=close,
            high=close,
            low=close,
            close=close,
            volume=100000,
        )
        for offset, close in enumerate(closes)
    ]


def test_rising_scenario_buys_twice():
    rules = [(ClosePriceChange(3, Direction.UP), BuyShares(100))]
    result = run_simulation(_series(CLOSES), rules, Portfolio(cash=1_000_000, shares=0))

    assert len(result.trades) == 2
    assert result.final_portfolio.shares == 200
    assert [trade.date for trade in result.trades] == [date(2024, 1, 2), date(2024, 1, 3)]
    assert result.final_portfolio.cash < 1_000_000


def test_five_percent_threshold_skips_smaller_move():
    rules = [(ClosePriceChange(5, Direction.UP), BuyShares(100))]
    result = run_simulation(_series(CLOSES), rules, Portfolio(cash=1_000_000, shares=0))

    assert len(result.trades) == 1
    assert result.final_portfolio.shares == 100


def test_buy_up_then_sell_down():
    rules = [
        Rule(ClosePriceChange(5, Direction.UP), BuyShares(100), name="buy"),
        Rule(ClosePriceChange(5, Direction.DOWN), SellAll(), name="sell"),
    ]
    result = run_simulation(_series(CLOSES), rules, Portfolio(cash=1_000_000, shares=0))

    assert [trade.side for trade in result.trades] == [TradeSide.BUY, TradeSide.SELL]
    assert result.trades[1].date == date(2024, 1, 4)
    assert result.trades[1].price == 1045
    assert result.trades[1].quantity == 100
    assert result.final_portfolio.shares == 0


def test_valuation_trajectory_skips_baseline():
    rules = [(Always(), Hold())]
    result = run_simulation(_series(CLOSES), rules, Portfolio(cash=1000, shares=10))

    assert [point.date for point in result.valuation] == [date(2024, 1, 1) + timedelta(days=i) for i in range(1, 5)]
    assert [point.total_value for point in result.valuation] == [1000 + 10 * close for close in CLOSES[1:]]
    assert result.initial_value == 1000 + 10 * 1000
    assert result.final_value == 1000 + 10 * 990
    assert result.total_return == pytest.approx(-100)
    assert result.total_return_pct == pytest.approx(-100 / 11000 * 100)


def test_same_step_rules_see_earlier_effects():
    rules = [
        (Always(), BuyPercentCash(100)),
        (Always(), BuyShares(1)),
        (Always(), SellAll()),
        (Always(), BuyShares(1)),
    ]
    result = run_simulation(_series([1000, 1000]), rules, Portfolio(cash=10_000, shares=0))

    sides = [trade.side for trade in result.trades]
    # The second buy fails on cash spent by the first, the final buy succeeds after the sale.
    assert sides == [TradeSide.BUY, TradeSide.SELL, TradeSide.BUY]
    assert result.trades[0].quantity == 9
    assert result.trades[1].quantity == 9
    assert result.final_portfolio.shares == 1


def test_formula_action_receives_signed_change():
    rules = [(ClosePriceChange(5, Direction.UP), BuyFormulaAmount("10000 * N + 2000"))]
    result = run_simulation(_series([1000, 1050]), rules, Portfolio(cash=1_000_000))

    # N = 5 -> 52000 notional at 1050: floor((52000 - 130) / 1050) = 49
    assert result.trades[0].quantity == 49


def test_formula_error_does_not_abort_run():
    rules = [
        (Always(), BuyFormulaAmount("N / 0")),
        (Always(), BuyShares(1)),
    ]
    result = run_simulation(_series(CLOSES), rules, Portfolio(cash=1_000_000))
    assert len(result.trades) == 4
    assert len(result.valuation) == 4


def test_disabled_rules_are_skipped():
    rules = [Rule(Always(), BuyShares(1), enabled=False)]
    result = run_simulation(_series(CLOSES), rules, Portfolio(cash=1_000_000))
    assert result.trades == []


def test_single_observation_has_no_steps():
    result = run_simulation(_series([1000]), [(Always(), BuyShares(1))], Portfolio(cash=5000))
    assert result.trades == []
    assert result.valuation == []
    assert result.final_value == 5000


def test_empty_series_is_rejected():
    with pytest.raises(DataIntegrityError) as excinfo:
        run_simulation([], [(Always(), Hold())], Portfolio(cash=1000))
    assert excinfo.value.code == DataIntegrityError.EMPTY_PRICES


def test_non_monotonic_dates_are_rejected():
    prices = _series(CLOSES)
    prices[2], prices[3] = prices[3], prices[2]
    with pytest.raises(DataIntegrityError) as excinfo:
        run_simulation(prices, [(Always(), Hold())], Portfolio(cash=1000))
    assert excinfo.value.code == DataIntegrityError.NON_MONOTONIC_DATES

    duplicated = _series(CLOSES[:2])
    duplicated.append(duplicated[-1])
    with pytest.raises(DataIntegrityError):
        run_simulation(duplicated, [], Portfolio(cash=1000))


def test_zero_previous_close_aborts_run():
    with pytest.raises(DataIntegrityError) as excinfo:
        run_simulation(_series([1000, 0, 1000]), [(ClosePriceChange(1), Hold())], Portfolio(cash=1000))
    assert excinfo.value.code == DataIntegrityError.NON_POSITIVE_PRICE


def test_runs_are_independent():
    rules = [(ClosePriceChange(3, Direction.UP), BuyShares(100))]
    initial = Portfolio(cash=1_000_000)
    first = run_simulation(_series(CLOSES), rules, initial)
    second = run_simulation(_series(CLOSES), rules, initial)

    assert first == second
    assert initial == Portfolio(cash=1_000_000)


def test_progress_callback_reports_each_step():
    updates = []
    simulator = StrategySimulator()
    simulator.run(_series(CLOSES), [(Always(), Hold())], Portfolio(cash=1000), progress=updates.append)

    assert updates[0].status == ProgressStatus.PREPARING
    assert updates[-1].status == ProgressStatus.COMPLETED
    running = [update.current for update in updates if update.status == ProgressStatus.RUNNING]
    assert running == [1, 2, 3, 4]
    assert all(update.total == 4 for update in updates)


def test_portfolio_invariant_after_every_step():
    closes = [1000, 1080, 950, 1200, 700, 1500, 1490, 1600]
    rules = [
        (ClosePriceChange(5, Direction.DOWN), SellAll()),
        (Always(), BuyPercentCash(100)),
        (Always(), BuyShares(1000)),
    ]
    result = run_simulation(_series(closes), rules, Portfolio(cash=50_000))
    for point in result.valuation:
        assert point.cash >= 0
        assert point.shares >= 0


def test_unusable_commission_rate_fails_before_any_step():
    updates = []
    with pytest.raises(ValueError, match="commission_rate"):
        StrategySimulator(commission_rate=1.5).run(
            _series([1000, 1000, 1000]),
            [(Always(), SellAll())],
            Portfolio(cash=0, shares=10),
            progress=updates.append,
        )
    assert updates == []
