"""Alert routing for simulation runs."""

from __future__ import annotations

from dataclasses import dataclass

from strategy_sim.monitoring.notifier import FORMULA_ERROR, RUN_COMPLETED, RUN_FAILED, Notifier


@dataclass
class Monitor:
    notifier: Notifier

    def formula_error(self, rule: str, message: str) -> None:
        self.notifier.notify(FORMULA_ERROR, f"{rule}: {message}")

    def run_failed(self, reason: str) -> None:
        self.notifier.notify(RUN_FAILED, reason)

    def run_completed(self, message: str) -> None:
        self.notifier.notify(RUN_COMPLETED, message)
