import sys
from pathlib import Path

from strategy_sim.config import freeze_config, load_config, verify_config_lock


def main() -> None:
    if len(sys.argv) < 2:
        raise SystemExit("Usage: python scripts/freeze_config.py <strategy_config_path>")
    path = Path(sys.argv[1])
    try:
        config = load_config(path)
    except ValueError as exc:
        raise SystemExit(f"Refusing to freeze {path}: {exc}") from exc

    lock_path = freeze_config(path)
    status = "ok" if verify_config_lock(path, lock_path) else "mismatch"
    enabled = sum(1 for rule in config.rules if rule.enabled)
    print(f"{config.name} v{config.version}: {enabled}/{len(config.rules)} rules enabled")
    print(f"Frozen {path} -> {lock_path} ({status})")


if __name__ == "__main__":
    main()
