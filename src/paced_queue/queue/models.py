"""
Data models for the paced queue scheduler.
"""
from dataclasses import dataclass, replace
from enum import Enum
from numbers import Real
from typing import Any, Callable, Optional, Union

# Delay value that disables auto-advance; the queue waits for next() instead.
MANUAL = "manual"

Delay = Union[float, int, str]


def is_manual_delay(delay_ms: Delay) -> bool:
    """
    Check whether a delay puts the queue in manual mode.

    Negative numbers count as manual, so the conventional -1 works too.

    Args:
        delay_ms: Configured delay

    Returns:
        True if the queue must wait for next() calls
    """
    if isinstance(delay_ms, bool) or not isinstance(delay_ms, Real):
        return True
    return delay_ms < 0


class SchedulerState(str, Enum):
    """Observable states of a queue scheduler."""
    IDLE = "idle"
    PAUSED = "paused"
    SCHEDULED = "scheduled"  # Timer pending
    DISPATCHING = "dispatching"  # Processing callback running
    AWAITING_MANUAL = "awaiting_manual"  # Batch outstanding, waiting for next()


@dataclass(frozen=True)
class QueueOptions:
    """Live scheduler options, swapped as a whole by update()."""

    delay_ms: Delay = 100
    batch_size: int = 1
    callback: Optional[Callable[..., Any]] = None
    complete: Optional[Callable[..., Any]] = None

    def __post_init__(self):
        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int):
            raise ValueError(f"batch_size must be an integer, got {self.batch_size!r}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if isinstance(self.delay_ms, str) and self.delay_ms != MANUAL:
            raise ValueError(f"delay_ms must be a number or {MANUAL!r}, got {self.delay_ms!r}")
        if isinstance(self.delay_ms, bool) or not isinstance(self.delay_ms, (Real, str)):
            raise ValueError(f"delay_ms must be a number or {MANUAL!r}, got {self.delay_ms!r}")

    @property
    def manual(self) -> bool:
        """True when the queue advances only on next()."""
        return is_manual_delay(self.delay_ms)

    @property
    def delay_seconds(self) -> Optional[float]:
        """Delay converted for the event loop, None in manual mode."""
        if self.manual:
            return None
        return self.delay_ms / 1000.0

    def merge(self, **changes: Any) -> "QueueOptions":
        """
        Return a copy with the given fields replaced.

        Raises:
            TypeError: If a field name is unknown
            ValueError: If a new value is invalid
        """
        return replace(self, **changes)


@dataclass
class QueueStats:
    """Snapshot of a scheduler's state and counters."""

    name: str
    state: SchedulerState
    queue_size: int
    recent_size: int
    paused: bool
    drained: bool
    delay_ms: Delay
    batch_size: int
    batches_dispatched: int
    items_dispatched: int
    retries: int
    completions: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or inspection."""
        return {
            "name": self.name,
            "state": self.state.value,
            "queue_size": self.queue_size,
            "recent_size": self.recent_size,
            "paused": self.paused,
            "drained": self.drained,
            "delay_ms": self.delay_ms,
            "batch_size": self.batch_size,
            "batches_dispatched": self.batches_dispatched,
            "items_dispatched": self.items_dispatched,
            "retries": self.retries,
            "completions": self.completions,
        }
