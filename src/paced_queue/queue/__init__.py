"""
Paced work queue.

Provides batching, pacing, retry and manual continuation for queued items.
"""

from .models import MANUAL, QueueOptions, QueueStats, SchedulerState, is_manual_delay
from .scheduler import QueueScheduler

__all__ = [
    "MANUAL",
    "QueueOptions",
    "QueueScheduler",
    "QueueStats",
    "SchedulerState",
    "is_manual_delay",
]
