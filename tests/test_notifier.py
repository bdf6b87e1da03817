import asyncio

import pytest

from draft_logs.memory import MemoryLogger
from draft_server.game.notifier import Notice, Notifier
from draft_server.game.timers import AsyncioScheduler, ManualScheduler


def test_starts_hidden():
    assert Notifier().current() == Notice(visible=False, status="pending", message="")


def test_notify_and_dismiss():
    notifier = Notifier()
    notice = notifier.notify("success", "Card banned successfully!")
    assert notice.to_dict() == {"visible": True, "status": "success", "message": "Card banned successfully!"}
    assert not notifier.dismiss().visible


def test_unknown_status():
    with pytest.raises(ValueError):
        Notifier().notify("warning", "nope")


def test_auto_dismiss():
    scheduler = ManualScheduler()
    notifier = Notifier(scheduler)
    notifier.notify("success", "hi", dismiss_after=2)
    scheduler.advance(1.9)
    assert notifier.current().visible
    scheduler.advance(0.1)
    assert not notifier.current().visible


def test_new_notice_replaces_pending_dismiss():
    scheduler = ManualScheduler()
    notifier = Notifier(scheduler)
    notifier.notify("success", "first", dismiss_after=2)
    scheduler.advance(1)
    notifier.notify("error", "second", dismiss_after=3)
    scheduler.advance(1.5)
    assert notifier.current().message == "second"
    assert len(scheduler.pending) == 1
    scheduler.advance(1.5)
    assert not notifier.current().visible


def test_manual_scheduler_fires_in_due_order():
    scheduler = ManualScheduler()
    fired = []
    scheduler.call_later(3, lambda: fired.append("late"))
    scheduler.call_later(1, lambda: fired.append("early"))
    cancelled = scheduler.call_later(2, lambda: fired.append("cancelled"))
    cancelled.cancel()

    assert scheduler.next_due() == 1
    assert scheduler.advance(5) == 2
    assert fired == ["early", "late"]
    assert scheduler.next_due() is None


@pytest.mark.asyncio
async def test_asyncio_scheduler_runs_and_cancels():
    scheduler = AsyncioScheduler()
    fired = []
    handle = scheduler.call_later(0.01, lambda: fired.append(1))
    cancelled = scheduler.call_later(0.01, lambda: fired.append(2))
    cancelled.cancel()
    assert handle.active
    await asyncio.sleep(0.05)
    assert fired == [1]
    assert not handle.active
    assert not cancelled.active


@pytest.mark.asyncio
async def test_asyncio_scheduler_logs_failing_callback():
    logger = MemoryLogger()
    scheduler = AsyncioScheduler(logger=logger)

    def boom():
        raise RuntimeError("kaput")

    handle = scheduler.call_later(0.01, boom)
    await asyncio.sleep(0.05)
    assert handle.task.done()
    assert handle.task.exception() is None
    assert logger.events("ERROR") == ["scheduled_callback_failed"]
    assert logger.records[0]["error"] == "kaput"
