# scheduled callbacks.
# The battle countdown and notice auto-dismiss both go through a Scheduler so
# they can be cancelled, and so tests can fast-forward them with
# ManualScheduler instead of sleeping.
import asyncio
from abc import ABC, abstractmethod
from typing import Callable, List, Optional


class TimerHandle(ABC):
    @abstractmethod
    def cancel(self): ...

    @property
    @abstractmethod
    def active(self) -> bool: ...


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class _TaskHandle(TimerHandle):
    def __init__(self, task: asyncio.Task):
        self.task = task

    def cancel(self):
        if not self.task.done():
            self.task.cancel()

    @property
    def active(self) -> bool:
        return not self.task.done()


class AsyncioScheduler(Scheduler):
    """Runs callbacks from a background task on the running event loop."""

    def __init__(self, logger=None):
        self.logger = logger

    def call_later(self, delay, callback):
        task = asyncio.get_running_loop().create_task(self._countdown(delay, callback))
        return _TaskHandle(task)

    async def _countdown(self, delay, callback):
        await asyncio.sleep(delay)
        try:
            callback()
        except Exception as e:
            # nobody awaits this task, so the log is the only report
            if self.logger:
                self.logger.error("scheduled_callback_failed", error=str(e), error_type=type(e).__name__)


class _ManualHandle(TimerHandle):
    def __init__(self, due: float, callback):
        self.due = due
        self.callback = callback
        self.cancelled = False
        self.fired = False

    def cancel(self):
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class ManualScheduler(Scheduler):
    """A clock that only moves when `advance` is called."""

    def __init__(self):
        self.now = 0.0
        self._pending: List[_ManualHandle] = []

    def call_later(self, delay, callback):
        handle = _ManualHandle(self.now + delay, callback)
        self._pending.append(handle)
        return handle

    @property
    def pending(self) -> List[TimerHandle]:
        return [h for h in self._pending if h.active]

    def advance(self, seconds: float) -> int:
        """Move the clock forward and fire everything that came due, oldest first.

        :return: number of callbacks fired.
        """
        self.now += seconds
        fired = 0
        while True:
            due = [h for h in self._pending if h.active and h.due <= self.now]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            handle.fired = True
            handle.callback()
            fired += 1
        self._pending = [h for h in self._pending if h.active]
        return fired

    def next_due(self) -> Optional[float]:
        active = self.pending
        return min(h.due for h in active) if active else None
