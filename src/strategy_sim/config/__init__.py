"""Strategy config loading and freezing."""

from strategy_sim.config.loader import (
    compute_config_hash,
    freeze_config,
    load_config,
    load_config_prices,
    parse_action,
    parse_condition,
    serialize_config,
    verify_config_lock,
)
from strategy_sim.config.models import MonitoringConfig, PriceSourceConfig, StrategyConfig

__all__ = [
    "MonitoringConfig",
    "PriceSourceConfig",
    "StrategyConfig",
    "compute_config_hash",
    "freeze_config",
    "load_config",
    "load_config_prices",
    "parse_action",
    "parse_condition",
    "serialize_config",
    "verify_config_lock",
]
