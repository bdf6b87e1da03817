# transaction status notice.
# Mirrors the result of the last engine action as {visible, status, message}.
# It never feeds back into the engine.
from dataclasses import dataclass, asdict
from typing import Optional

from draft_server.game.timers import Scheduler, TimerHandle

PENDING = "pending"
SUCCESS = "success"
ERROR = "error"
STATUSES = {PENDING, SUCCESS, ERROR}

ACTION_NOTICE_SECONDS = 2
RESULT_NOTICE_SECONDS = 3


@dataclass(frozen=True)
class Notice:
    visible: bool = False
    status: str = PENDING
    message: str = ""

    def to_dict(self) -> dict:
        return asdict(self)


class Notifier:
    def __init__(self, scheduler: Optional[Scheduler] = None):
        self.scheduler = scheduler
        self._notice = Notice()
        self._dismiss_handle: Optional[TimerHandle] = None

    def notify(self, status: str, message: str, dismiss_after: Optional[float] = None) -> Notice:
        if status not in STATUSES:
            raise ValueError(f"Unknown notice status {status!r}")
        self._cancel_dismiss()
        self._notice = Notice(visible=True, status=status, message=message)
        if dismiss_after is not None and self.scheduler is not None:
            self._dismiss_handle = self.scheduler.call_later(dismiss_after, self._auto_dismiss)
        return self._notice

    def dismiss(self) -> Notice:
        self._cancel_dismiss()
        self._notice = Notice()
        return self._notice

    def _auto_dismiss(self):
        self._dismiss_handle = None
        self._notice = Notice()

    def current(self) -> Notice:
        return self._notice

    def _cancel_dismiss(self):
        if self._dismiss_handle is not None:
            self._dismiss_handle.cancel()
            self._dismiss_handle = None
