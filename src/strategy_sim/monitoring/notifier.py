"""Notification backends for simulation alerts."""

from __future__ import annotations

from dataclasses import dataclass, field

FORMULA_ERROR = "FORMULA_ERROR"
RUN_FAILED = "RUN_FAILED"
RUN_COMPLETED = "RUN_COMPLETED"

EVENT_LEVELS = {
    RUN_FAILED: "ERROR",
    FORMULA_ERROR: "WARN",
    RUN_COMPLETED: "INFO",
}


class Notifier:
    def notify(self, event: str, message: str) -> None:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class LogNotifier(Notifier):
    """Prints alerts tagged with a severity derived from the event name."""

    prefix: str = "[SIM]"
    muted: frozenset[str] = field(default_factory=frozenset)

    def notify(self, event: str, message: str) -> None:
        if event in self.muted:
            return
        level = EVENT_LEVELS.get(event, "INFO")
        print(f"{self.prefix} {level} {event}: {message}")
