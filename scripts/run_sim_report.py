from __future__ import annotations

import argparse
import json
from datetime import datetime, timezone
from pathlib import Path

from strategy_sim.config import load_config, load_config_prices
from strategy_sim.monitoring import LogNotifier, Monitor
from strategy_sim.runtime import create_run_context
from strategy_sim.simulator import StrategySimulator


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", required=True)
    parser.add_argument("--output", required=True)
    parser.add_argument("--audit-log", default=None)
    args = parser.parse_args()

    config_path = Path(args.config)
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config = load_config(config_path)
    context = create_run_context(config_path, config.run_id_prefix)
    audit = context.open_audit_log(args.audit_log or config.monitoring.audit_log_path)
    prices = load_config_prices(config)

    simulator = StrategySimulator(
        commission_rate=config.commission_rate,
        audit_log=audit,
        monitor=Monitor(LogNotifier()),
    )
    result = simulator.run(prices, config.rules, config.initial_portfolio)

    report = {
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        **context.metadata(),
        "summary": {
            "initial_value": result.initial_value,
            "final_value": result.final_value,
            "total_return": result.total_return,
            "total_return_pct": result.total_return_pct,
            "final_cash": result.final_portfolio.cash,
            "final_shares": result.final_portfolio.shares,
            "trades": len(result.trades),
        },
        "trades": [
            {
                "date": trade.date.isoformat() if trade.date else None,
                "side": trade.side.value,
                "quantity": trade.quantity,
                "price": trade.price,
                "commission": trade.commission,
                "total": trade.total,
            }
            for trade in result.trades
        ],
        "valuation": [
            {
                "date": point.date.isoformat(),
                "cash": point.cash,
                "shares": point.shares,
                "close": point.close,
                "total_value": point.total_value,
            }
            for point in result.valuation
        ],
    }

    output_path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
    print(f"Wrote {output_path}")


if __name__ == "__main__":
    main()
