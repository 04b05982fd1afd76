"""Price data models and loaders."""

from strategy_sim.data.loader import filter_prices, load_prices_csv
from strategy_sim.data.models import PriceObservation

__all__ = ["PriceObservation", "filter_prices", "load_prices_csv"]
