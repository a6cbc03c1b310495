"""Paced Queue - timer-driven batch work queue."""

from .queue import MANUAL, QueueOptions, QueueScheduler, QueueStats, SchedulerState

__version__ = "0.1.0"

__all__ = [
    "MANUAL",
    "QueueOptions",
    "QueueScheduler",
    "QueueStats",
    "SchedulerState",
    "__version__",
]
