"""Monitoring exports."""

from strategy_sim.monitoring.audit import AuditLog
from strategy_sim.monitoring.monitor import Monitor
from strategy_sim.monitoring.notifier import LogNotifier, Notifier

__all__ = [
    "AuditLog",
    "LogNotifier",
    "Monitor",
    "Notifier",
]
