"""Load and freeze strategy configuration files."""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml

from strategy_sim.config.models import MonitoringConfig, PriceSourceConfig, StrategyConfig
from strategy_sim.data.loader import filter_prices, load_prices_csv
from strategy_sim.data.models import PriceObservation
from strategy_sim.execution.executor import COMMISSION_RATE
from strategy_sim.execution.models import Portfolio
from strategy_sim.formula import validate_formula
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

CONDITION_TYPES: dict[str, type] = {
    "always": Always,
    "close_price_change": ClosePriceChange,
    "high_price_change": HighPriceChange,
    "low_price_change": LowPriceChange,
    "price_change_range": PriceChangeRange,
    "price_value_range": PriceValueRange,
}

ACTION_TYPES: dict[str, type] = {
    "buy_percent_cash": BuyPercentCash,
    "buy_fixed_amount": BuyFixedAmount,
    "buy_shares": BuyShares,
    "buy_formula_amount": BuyFormulaAmount,
    "buy_formula_shares": BuyFormulaShares,
    "buy_formula_percent": BuyFormulaPercent,
    "sell_percent_shares": SellPercentShares,
    "sell_fixed_amount": SellFixedAmount,
    "sell_shares": SellShares,
    "sell_formula_amount": SellFormulaAmount,
    "sell_formula_shares": SellFormulaShares,
    "sell_formula_percent": SellFormulaPercent,
    "sell_all": SellAll,
    "hold": Hold,
}

_ENUM_FIELDS: dict[type, dict[str, type[Enum]]] = {
    ClosePriceChange: {"direction": Direction},
    HighPriceChange: {"direction": Direction},
    LowPriceChange: {"direction": Direction},
    PriceChangeRange: {"field": PriceField, "direction": RangeDirection, "bounds": RangeBounds},
    PriceValueRange: {"bounds": RangeBounds},
}

_FLOAT_FIELDS = {
    "threshold_percent",
    "min_percent",
    "max_percent",
    "min_price",
    "max_price",
    "percent",
    "amount",
}
_INT_FIELDS = {"count"}


def load_config(path: str | Path) -> StrategyConfig:
    path = Path(path)
    data = _load_yaml(path)

    name = str(_require(data, "name"))
    version = str(_require(data, "version"))
    run_id_prefix = str(data.get("run_id_prefix", name))

    portfolio_data = _require(data, "initial_portfolio")
    try:
        initial_portfolio = Portfolio(
            cash=float(_require(portfolio_data, "cash")),
            shares=int(portfolio_data.get("shares", 0)),
        )
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid initial_portfolio: {exc}") from exc

    commission_rate = float(data.get("commission_rate", COMMISSION_RATE))
    if not 0 <= commission_rate < 1:
        raise ValueError(f"commission_rate must be in [0, 1), got {commission_rate}")

    rules = [_parse_rule(item, index) for index, item in enumerate(_require(data, "rules"), start=1)]
    prices = _parse_prices(_require(data, "prices"), base_dir=path.parent)
    monitoring = MonitoringConfig(
        audit_log_path=str(data.get("monitoring", {}).get("audit_log_path", "runtime/audit.log")),
    )

    return StrategyConfig(
        name=name,
        version=version,
        run_id_prefix=run_id_prefix,
        initial_portfolio=initial_portfolio,
        rules=rules,
        prices=prices,
        commission_rate=commission_rate,
        monitoring=monitoring,
    )


def load_config_prices(config: StrategyConfig) -> list[PriceObservation]:
    prices = load_prices_csv(config.prices.path)
    return filter_prices(prices, config.prices.start_date, config.prices.end_date)


def compute_config_hash(path: str | Path) -> str:
    path = Path(path)
    content = path.read_bytes()
    return hashlib.sha256(content).hexdigest()


def freeze_config(path: str | Path, lock_path: Optional[str | Path] = None) -> Path:
    path = Path(path)
    config_hash = compute_config_hash(path)
    if lock_path is None:
        lock_path = path.with_suffix(path.suffix + ".lock.json")
    lock_path = Path(lock_path)

    payload = {
        "config_path": str(path),
        "config_hash": config_hash,
        "frozen_at_utc": datetime.now(timezone.utc).isoformat(),
    }
    lock_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return lock_path


def verify_config_lock(path: str | Path, lock_path: Optional[str | Path] = None) -> bool:
    path = Path(path)
    if lock_path is None:
        lock_path = path.with_suffix(path.suffix + ".lock.json")
    lock_path = Path(lock_path)
    if not lock_path.exists():
        return False
    payload = json.loads(lock_path.read_text(encoding="utf-8"))
    expected = payload.get("config_hash")
    return expected == compute_config_hash(path)


def parse_condition(data: dict[str, Any]) -> ConditionSpec:
    return _build_spec(data, CONDITION_TYPES, "condition")


def parse_action(data: dict[str, Any]) -> ActionSpec:
    action = _build_spec(data, ACTION_TYPES, "action")
    if isinstance(action, FORMULA_ACTIONS):
        check = validate_formula(action.formula)
        if not check.valid:
            raise ValueError(f"Invalid formula {action.formula!r}: {check.reason}")
    return action


def serialize_config(config: StrategyConfig) -> dict[str, Any]:
    return {
        "name": config.name,
        "version": config.version,
        "run_id_prefix": config.run_id_prefix,
        "initial_portfolio": {
            "cash": config.initial_portfolio.cash,
            "shares": config.initial_portfolio.shares,
        },
        "commission_rate": config.commission_rate,
        "rules": [
            {
                "name": rule.name,
                "enabled": rule.enabled,
                "condition": _serialize_spec(rule.condition, CONDITION_TYPES),
                "action": _serialize_spec(rule.action, ACTION_TYPES),
            }
            for rule in config.rules
        ],
        "prices": {
            "path": str(config.prices.path),
            "start_date": config.prices.start_date.isoformat() if config.prices.start_date else None,
            "end_date": config.prices.end_date.isoformat() if config.prices.end_date else None,
        },
        "monitoring": {"audit_log_path": config.monitoring.audit_log_path},
    }


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise ValueError(f"Missing required config key: {key}")
    return data[key]


def _parse_enum(enum_cls: type[Enum], value: Any, key: str) -> Enum:
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise ValueError(f"Invalid {key}: {value}") from exc


def _parse_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Invalid {key}: {value}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {key}: {value}") from exc
    if not number.is_integer():
        raise ValueError(f"Invalid {key}: {value} is not a whole number")
    return int(number)


def _parse_date(value: Any, key: str) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise ValueError(f"Invalid {key}: {value}") from exc


def _parse_rule(data: dict[str, Any], index: int) -> Rule:
    name = str(data.get("name", f"rule-{index}")) if isinstance(data, dict) else f"rule-{index}"
    try:
        condition = parse_condition(_require(data, "condition"))
        action = parse_action(_require(data, "action"))
    except ValueError as exc:
        raise ValueError(f"Rule {name}: {exc}") from exc
    return Rule(
        condition=condition,
        action=action,
        name=name,
        enabled=bool(data.get("enabled", True)),
    )


def _parse_prices(data: dict[str, Any], base_dir: Path) -> PriceSourceConfig:
    path = Path(str(_require(data, "path")))
    if not path.is_absolute():
        path = base_dir / path
    start_date = _parse_date(data.get("start_date"), "start_date")
    end_date = _parse_date(data.get("end_date"), "end_date")
    if start_date and end_date and start_date > end_date:
        raise ValueError("start_date must not be after end_date")
    return PriceSourceConfig(path=path, start_date=start_date, end_date=end_date)


def _build_spec(data: dict[str, Any], kinds: dict[str, type], what: str):
    kind = _require(data, "type")
    spec_cls = kinds.get(kind)
    if spec_cls is None:
        raise ValueError(f"Unknown {what} type: {kind}")

    names = {item.name for item in fields(spec_cls)}
    unknown = sorted(set(data) - names - {"type"})
    if unknown:
        raise ValueError(f"Unknown {what} parameters for {kind}: {', '.join(unknown)}")

    enums = _ENUM_FIELDS.get(spec_cls, {})
    try:
        kwargs: dict[str, Any] = {}
        for key in names & set(data):
            value = data[key]
            if key in enums:
                value = _parse_enum(enums[key], value, key)
            elif key in _INT_FIELDS:
                value = _parse_int(value, key)
            elif key in _FLOAT_FIELDS:
                value = float(value)
            elif key == "formula":
                value = str(value)
            kwargs[key] = value
        return spec_cls(**kwargs)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Invalid {what} {kind}: {exc}") from exc


def _serialize_spec(spec: Any, kinds: dict[str, type]) -> dict[str, Any]:
    names = {spec_cls: kind for kind, spec_cls in kinds.items()}
    payload: dict[str, Any] = {"type": names[type(spec)]}
    for item in fields(spec):
        value = getattr(spec, item.name)
        payload[item.name] = value.value if isinstance(value, Enum) else value
    return payload
