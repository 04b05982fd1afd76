"""Configuration models for reproducible strategy runs."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional

from strategy_sim.execution.executor import COMMISSION_RATE
from strategy_sim.execution.models import Portfolio
from strategy_sim.rules.models import Rule


@dataclass(frozen=True)
class PriceSourceConfig:
    path: Path
    start_date: Optional[date] = None
    end_date: Optional[date] = None


@dataclass(frozen=True)
class MonitoringConfig:
    audit_log_path: str = "runtime/audit.log"


@dataclass(frozen=True)
class StrategyConfig:
    name: str
    version: str
    run_id_prefix: str
    initial_portfolio: Portfolio
    rules: list[Rule]
    prices: PriceSourceConfig
    commission_rate: float = COMMISSION_RATE
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)
