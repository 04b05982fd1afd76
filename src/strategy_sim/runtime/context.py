"""Identity and metadata of a single simulation run."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from strategy_sim.config.loader import compute_config_hash
from strategy_sim.monitoring.audit import AuditLog


@dataclass(frozen=True)
class RunContext:
    run_id: str
    config_path: Path
    config_hash: str
    started_at: datetime

    def open_audit_log(self, path: str | Path) -> AuditLog:
        """Audit log whose records carry this run's id and config hash."""
        return AuditLog(path, run_id=self.run_id, config_hash=self.config_hash)

    def metadata(self) -> dict[str, str]:
        return {
            "run_id": self.run_id,
            "config_path": str(self.config_path),
            "config_hash": self.config_hash,
            "started_at_utc": self.started_at.isoformat(),
        }


def make_run_id(prefix: str, config_hash: str, started_at: datetime) -> str:
    return f"{prefix}-{started_at:%Y%m%dT%H%M%SZ}-{config_hash[:8]}"


def create_run_context(
    config_path: str | Path,
    run_id_prefix: str,
    run_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> RunContext:
    path = Path(config_path)
    config_hash = compute_config_hash(path)
    started_at = now if now is not None else datetime.now(timezone.utc)
    return RunContext(
        run_id=run_id or make_run_id(run_id_prefix, config_hash, started_at),
        config_path=path,
        config_hash=config_hash,
        started_at=started_at,
    )
