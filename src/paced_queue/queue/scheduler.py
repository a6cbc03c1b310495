"""
Timer-driven batch scheduler for queued work items.
"""
import asyncio
import logging
from collections import deque
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional

from ..metrics import MetricsCollector, get_metrics
from .models import Delay, QueueOptions, QueueStats, SchedulerState

if TYPE_CHECKING:
    from ..config import Config

logger = logging.getLogger(__name__)


class QueueScheduler:
    """
    Dispatches queued items to a processing callback in batches.

    In paced mode (numeric ``delay_ms``) a one-shot event loop timer re-runs the
    dispatch loop after every batch. In manual mode (``delay_ms=MANUAL``) the
    batch stays outstanding until ``next()`` is called, which suits serial
    asynchronous work that must not overlap.

    The processing callback is called as ``callback(scheduler, payload)`` where
    payload is a single item when ``batch_size`` is 1 and a list otherwise.
    Returning ``True`` puts the batch back at the front of the queue. The
    completion callback is called as ``complete(scheduler)`` once each time the
    queue drains.

    Callback exceptions propagate to whoever triggered the dispatch and leave
    the batch outstanding; call ``next()`` or ``next(retry=True)`` to recover.
    Paced mode needs a running event loop or ``loop=``; without one
    ``RuntimeError`` is raised before any item leaves the queue.
    """

    def __init__(
        self,
        callback: Optional[Callable[..., Any]] = None,
        complete: Optional[Callable[..., Any]] = None,
        *,
        delay_ms: Delay = 100,
        batch_size: int = 1,
        queue: Optional[Iterable[Any]] = None,
        paused: bool = False,
        name: str = "default",
        loop: Optional[asyncio.AbstractEventLoop] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        """
        Initialize the scheduler and start it unless paused.

        Args:
            callback: Called for each item or batch
            complete: Called whenever the queue drains
            delay_ms: Milliseconds between batches, or MANUAL to wait for next()
            batch_size: Items per callback invocation
            queue: Initial queue contents
            paused: Start in the paused state
            name: Label used in logs and metrics
            loop: Event loop for timers (default: the running loop)
            metrics: Optional Prometheus collector
        """
        self._options = QueueOptions(
            delay_ms=delay_ms,
            batch_size=batch_size,
            callback=callback,
            complete=complete,
        )
        self._name = name
        self._loop = loop
        self._metrics = metrics

        self._queue: deque = deque(queue or ())
        self._recent: list = []
        self._paused = paused
        self._drained = False
        self._timer: Optional[asyncio.TimerHandle] = None
        self._dispatch_depth = 0

        # Statistics
        self._batches_dispatched = 0
        self._items_dispatched = 0
        self._retries = 0
        self._completions = 0

        if not self._paused:
            self.start()

    @classmethod
    def from_config(
        cls,
        config: "Config",
        callback: Optional[Callable[..., Any]] = None,
        complete: Optional[Callable[..., Any]] = None,
        **kwargs: Any,
    ) -> "QueueScheduler":
        """
        Build a scheduler from a Config.

        Keyword arguments override the config (e.g. ``queue=[...]``).
        """
        params: dict[str, Any] = {
            "delay_ms": config.delay_ms,
            "batch_size": config.batch_size,
            "paused": config.paused,
            "name": config.name,
        }
        if config.metrics_enabled:
            params["metrics"] = get_metrics()
        params.update(kwargs)
        return cls(callback, complete, **params)

    # === Inspection ===

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> QueueOptions:
        return self._options

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def drained(self) -> bool:
        return self._drained

    @property
    def recent(self) -> tuple:
        """Items of the outstanding batch."""
        return tuple(self._recent)

    @property
    def is_scheduled(self) -> bool:
        return self._timer is not None

    @property
    def state(self) -> SchedulerState:
        """Current state, derived from the internal flags."""
        if self._dispatch_depth:
            return SchedulerState.DISPATCHING
        if self._recent:
            return SchedulerState.AWAITING_MANUAL
        if self._paused:
            return SchedulerState.PAUSED
        if self._timer is not None:
            return SchedulerState.SCHEDULED
        return SchedulerState.IDLE

    def size(self) -> int:
        """Get the current queue length, excluding the outstanding batch."""
        return len(self._queue)

    def __len__(self) -> int:
        return len(self._queue)

    def index_of(self, item: Any) -> int:
        """
        Get the position of an item in the queue.

        Args:
            item: Item to look for (compared with ==)

        Returns:
            0-based index of the first match, -1 if not queued
        """
        try:
            return self._queue.index(item)
        except ValueError:
            return -1

    def __contains__(self, item: Any) -> bool:
        return self.index_of(item) != -1

    def stats(self) -> QueueStats:
        """
        Get current queue statistics.

        Returns:
            Queue statistics
        """
        return QueueStats(
            name=self._name,
            state=self.state,
            queue_size=len(self._queue),
            recent_size=len(self._recent),
            paused=self._paused,
            drained=self._drained,
            delay_ms=self._options.delay_ms,
            batch_size=self._options.batch_size,
            batches_dispatched=self._batches_dispatched,
            items_dispatched=self._items_dispatched,
            retries=self._retries,
            completions=self._completions,
        )

    # === Mutation ===

    def add(self, item: Any, priority: bool = False) -> int:
        """
        Add a single item to the queue.

        Args:
            item: Item to add
            priority: Add to the front instead of the back

        Returns:
            Queue length after the item has been added
        """
        return self.add_each([item], priority)

    def add_each(self, items: Iterable[Any], priority: bool = False) -> int:
        """
        Add several items to the queue, individually.

        Priority items keep their relative order at the front of the queue.
        Processing resumes immediately unless the queue is paused.

        Args:
            items: Items to add
            priority: Add to the front instead of the back

        Returns:
            Queue length after the items have been added
        """
        items = list(items)
        if not items:
            return len(self._queue)

        self._drained = False
        if priority:
            self._queue.extendleft(reversed(items))
        else:
            self._queue.extend(items)

        logger.debug(
            f"Queue {self._name}: added {len(items)} item(s)",
            extra={"queue": self._name, "priority": priority, "queue_size": len(self._queue)},
        )
        self._update_gauges()

        if not self._paused:
            self.start()
        return len(self._queue)

    def start(self) -> None:
        """
        Start or resume dispatching.

        No-op while a timer is pending or a batch is outstanding. Starting an
        empty queue makes it dispatch as soon as items are added.
        """
        if self._paused:
            logger.info(f"Resuming queue {self._name}", extra={"queue": self._name})
        self._paused = False

        if self._queue and self._timer is None and not self._recent:
            self._run()

    def next(self, retry: bool = False) -> None:
        """
        Continue a manual-mode queue after the outstanding batch is resolved.

        Args:
            retry: Put the outstanding batch back at the front of the queue
        """
        if retry and self._recent:
            self._requeue_recent()
        self._recent = []
        self._update_gauges()

        if self._queue:
            if not self._paused:
                self.start()
        elif not self._drained:
            self._drained = True
            self._notify_complete(self._options)

    def clear(self) -> list:
        """
        Empty the queue. The paused state is unchanged.

        Returns:
            The previous queue contents (the outstanding batch is dropped)
        """
        self._stop()
        previous = list(self._queue)
        self._queue.clear()
        self._recent = []
        self._drained = True

        logger.info(
            f"Cleared queue {self._name} ({len(previous)} item(s) dropped)",
            extra={"queue": self._name},
        )
        if self._metrics:
            self._metrics.record_cleared(self._name, len(previous))
        self._update_gauges()
        return previous

    def pause(self) -> None:
        """Pause the queue. Added items wait until start() is called."""
        self._stop()
        self._paused = True
        logger.info(f"Paused queue {self._name}", extra={"queue": self._name})

    def update(self, **changes: Any) -> None:
        """
        Update delay_ms, batch_size, callback or complete.

        Changes apply from the next dispatch; a pending timer keeps its delay.

        Raises:
            TypeError: If an unknown option is given
            ValueError: If a value is invalid
        """
        self._options = self._options.merge(**changes)
        logger.debug(
            f"Updated queue {self._name} options: {sorted(changes)}",
            extra={"queue": self._name},
        )

    # === Dispatch loop ===

    def _run(self) -> None:
        """Run one dispatch iteration; timers re-enter here."""
        options = self._options
        self._stop()

        if not self._queue:
            was_drained = self._drained
            self._drained = True
            if not was_drained:
                self._notify_complete(options)
            return

        loop = None
        if not options.manual:
            loop = self._loop or asyncio.get_running_loop()

        count = min(options.batch_size, len(self._queue))
        self._recent = [self._queue.popleft() for _ in range(count)]
        self._batches_dispatched += 1
        self._items_dispatched += count
        if self._metrics:
            self._metrics.record_batch(self._name, count)
        self._update_gauges()

        logger.debug(
            f"Queue {self._name}: dispatching {count} item(s)",
            extra={"queue": self._name, "batch_size": count, "queue_size": len(self._queue)},
        )

        if options.callback is not None:
            payload = self._recent[0] if options.batch_size == 1 else list(self._recent)
            self._dispatch_depth += 1
            try:
                result = options.callback(self, payload)
            except Exception as e:
                logger.error(
                    f"Queue {self._name}: processing callback failed: {e}",
                    extra={"queue": self._name},
                )
                if self._metrics:
                    self._metrics.record_callback_error(self._name, "callback")
                raise
            finally:
                self._dispatch_depth -= 1

            if result is True:
                self._requeue_recent()

        if options.manual:
            self._update_gauges()
            return

        self._recent = []
        self._update_gauges()
        if self._paused:
            return
        self._arm(loop, options.delay_seconds)

    def _requeue_recent(self) -> None:
        """Put the outstanding batch back at the front, in order."""
        if not self._recent:
            return
        self._drained = False
        self._queue.extendleft(reversed(self._recent))
        self._recent = []
        self._retries += 1
        if self._metrics:
            self._metrics.record_retry(self._name)
        logger.debug(f"Queue {self._name}: batch put back for retry", extra={"queue": self._name})

    def _notify_complete(self, options: QueueOptions) -> None:
        """Signal that the queue has drained."""
        self._completions += 1
        if self._metrics:
            self._metrics.record_completion(self._name)
        logger.info(f"Queue {self._name} drained", extra={"queue": self._name})

        if options.complete is None:
            return
        try:
            options.complete(self)
        except Exception as e:
            logger.error(
                f"Queue {self._name}: completion callback failed: {e}",
                extra={"queue": self._name},
            )
            if self._metrics:
                self._metrics.record_callback_error(self._name, "complete")
            raise

    def _arm(self, loop: asyncio.AbstractEventLoop, delay_seconds: float) -> None:
        """Schedule the next iteration, replacing any pending timer."""
        self._stop()
        self._timer = loop.call_later(delay_seconds, self._run)

    def _stop(self) -> None:
        """Cancel the pending timer, if any."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _update_gauges(self) -> None:
        if self._metrics:
            self._metrics.update_sizes(self._name, size=len(self._queue), recent=len(self._recent))
