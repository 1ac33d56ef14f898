from __future__ import annotations

from src.kanji_memory_game.services.scheduler import TimerQueue


def test_runs_due_tasks_in_deadline_order(clock):
    timers = TimerQueue(clock)
    fired: list[str] = []
    timers.schedule(1.0, lambda: fired.append("late"), "late")
    timers.schedule(0.5, lambda: fired.append("early"), "early")
    assert timers.run_due() == 0
    clock.advance(0.6)
    assert timers.run_due() == 1
    clock.advance(1.0)
    assert timers.run_due() == 1
    assert fired == ["early", "late"]
    assert timers.pending_count() == 0


def test_cancel_single_task(clock):
    timers = TimerQueue(clock)
    fired: list[str] = []
    handle = timers.schedule(0.1, lambda: fired.append("x"))
    assert timers.is_pending(handle)
    assert timers.cancel(handle)
    assert not timers.cancel(handle)
    clock.advance(1)
    timers.run_due()
    assert fired == []
    assert not timers.is_pending(handle)


def test_cancel_all_drops_everything_scheduled_before(clock):
    timers = TimerQueue(clock)
    fired: list[str] = []
    timers.schedule(0.1, lambda: fired.append("old"))
    timers.cancel_all()
    timers.schedule(0.1, lambda: fired.append("new"))
    clock.advance(1)
    timers.run_due()
    assert fired == ["new"]


def test_chained_tasks_run_in_same_pump_when_due(clock):
    timers = TimerQueue(clock)
    fired: list[str] = []

    def first():
        fired.append("first")
        timers.schedule(0.0, lambda: fired.append("second"))

    timers.schedule(0.2, first)
    clock.advance(0.5)
    assert timers.run_due() == 2
    assert fired == ["first", "second"]


def test_next_due_in(clock):
    timers = TimerQueue(clock)
    assert timers.next_due_in() is None
    timers.schedule(1.5, lambda: None)
    clock.advance(0.5)
    assert timers.next_due_in() == 1.0
    clock.advance(5)
    assert timers.next_due_in() == 0.0
