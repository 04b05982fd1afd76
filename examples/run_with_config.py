from pathlib import Path

from strategy_sim.config import freeze_config, load_config, load_config_prices, verify_config_lock
from strategy_sim.monitoring import LogNotifier, Monitor
from strategy_sim.runtime import create_run_context
from strategy_sim.simulator import StrategySimulator


config_path = Path("configs") / "momentum_v1.yaml"
config = load_config(config_path)
lock_path = freeze_config(config_path)
assert verify_config_lock(config_path, lock_path)

context = create_run_context(config_path, config.run_id_prefix)

audit = context.open_audit_log(config.monitoring.audit_log_path)
audit.log("run_start", {"config": str(config_path), "lock": str(lock_path)})

simulator = StrategySimulator(
    commission_rate=config.commission_rate,
    audit_log=audit,
    monitor=Monitor(LogNotifier()),
)
result = simulator.run(
    load_config_prices(config),
    config.rules,
    config.initial_portfolio,
    progress=lambda progress: print(f"{progress.status.value} {progress.current}/{progress.total}"),
)

print("Run:", context.run_id)
print("Trades:", len(result.trades))
print(f"Return: {result.total_return_pct:.2f}%")
