import time

from src.client import WorkTimer


def test_manual_ticks_and_rounding():
    timer = WorkTimer()
    assert timer.duration_minutes() == 0
    assert timer.resolve_duration(15) == 15

    timer.tick()
    assert timer.elapsed_seconds == 1
    assert timer.duration_minutes() == 1
    assert timer.resolve_duration(15) == 1

    for _ in range(60):
        timer.tick()
    assert timer.format_elapsed() == "1:01"
    assert timer.duration_minutes() == 2


def test_reset():
    timer = WorkTimer()
    for _ in range(5):
        timer.tick()
    timer.reset()
    assert timer.elapsed_seconds == 0
    assert timer.format_elapsed() == "0:00"
    assert not timer.running


def test_background_ticks_accumulate():
    timer = WorkTimer(tick_seconds=0.01)
    timer.start()
    assert timer.running
    time.sleep(0.2)
    timer.stop()
    assert not timer.running

    elapsed = timer.elapsed_seconds
    assert elapsed > 0
    time.sleep(0.05)
    assert timer.elapsed_seconds == elapsed


def test_toggle():
    timer = WorkTimer(tick_seconds=0.01)
    assert timer.toggle() is True
    assert timer.toggle() is False
