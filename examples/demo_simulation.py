from datetime import date, timedelta

from strategy_sim.data import PriceObservation
from strategy_sim.execution import Portfolio
from strategy_sim.rules import (
    BuyFormulaShares,
    BuyShares,
    ClosePriceChange,
    Direction,
    Rule,
    SellAll,
)
from strategy_sim.simulator import run_simulation


closes = [1000, 1050, 1100, 1045, 990, 1010, 1065]
start = date(2024, 1, 2)
prices = [
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

rules = [
    Rule(ClosePriceChange(5, Direction.DOWN), SellAll(), name="exit on drop"),
    Rule(ClosePriceChange(5, Direction.UP), BuyShares(100), name="breakout"),
    Rule(ClosePriceChange(1, Direction.UP), BuyFormulaShares("2 * N"), name="scale in"),
]

result = run_simulation(prices, rules, Portfolio(cash=1_000_000, shares=0))

for trade in result.trades:
    print(trade.date, trade.side.value, trade.quantity, f"{trade.total:.2f}")
for point in result.valuation:
    print(point.date, point.shares, f"{point.total_value:.2f}")
print(f"Return: {result.total_return_pct:.2f}%")
