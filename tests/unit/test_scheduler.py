from __future__ import annotations

from hostbridge import ManualScheduler


def test_callbacks_fire_in_deadline_order() -> None:
    clock = ManualScheduler()
    fired: list[str] = []
    clock.call_later(3, fired.append, "c")
    clock.call_later(1, fired.append, "a")
    clock.call_later(2, fired.append, "b")

    count = clock.advance(5)

    assert fired == ["a", "b", "c"]
    assert count == 3
    assert clock.now == 5


def test_equal_deadlines_fire_in_scheduling_order() -> None:
    clock = ManualScheduler()
    fired: list[int] = []
    for n in range(4):
        clock.call_later(1, fired.append, n)

    clock.advance(1)

    assert fired == [0, 1, 2, 3]


def test_cancelled_timer_never_fires() -> None:
    clock = ManualScheduler()
    fired: list[str] = []
    timer = clock.call_later(1, fired.append, "x")
    timer.cancel()

    assert clock.pending == 0
    assert clock.advance(10) == 0
    assert fired == []


def test_nothing_fires_before_deadline() -> None:
    clock = ManualScheduler()
    fired: list[str] = []
    clock.call_later(10, fired.append, "late")

    clock.advance(9.99)

    assert fired == []
    assert clock.pending == 1


def test_run_pending_fires_everything_outstanding() -> None:
    clock = ManualScheduler(start=100.0)
    fired: list[str] = []
    clock.call_later(30, fired.append, "a")
    clock.call_later(0.5, fired.append, "b")

    clock.run_pending()

    assert fired == ["b", "a"]
    assert clock.now == 130.0
    assert clock.run_pending() == 0
