import threading

from gnss_viewer.runtime.staleness import StalenessTimer


def test_only_latest_generation_fires() -> None:
    fired: list[int] = []
    timer = StalenessTimer(60.0, lambda: fired.append(1))
    first = timer.touch()
    second = timer.touch()

    assert second == first + 1
    assert timer._fire(first) is False
    assert fired == []
    assert timer._fire(second) is True
    assert fired == [1]
    timer.cancel()


def test_cancel_stops_pending_and_future_fires() -> None:
    fired: list[int] = []
    timer = StalenessTimer(60.0, lambda: fired.append(1))
    generation = timer.touch()
    timer.cancel()

    assert timer.pending is False
    assert timer._fire(generation) is False
    timer.touch()
    assert timer.pending is False
    assert fired == []


def test_timer_fires_after_timeout() -> None:
    expired = threading.Event()
    timer = StalenessTimer(0.05, expired.set)
    timer.touch()

    assert expired.wait(timeout=2.0)
    assert timer.pending is False


def test_touch_postpones_expiry() -> None:
    expired = threading.Event()
    timer = StalenessTimer(0.3, expired.set)
    timer.touch()
    assert not expired.wait(timeout=0.1)
    timer.touch()
    assert not expired.wait(timeout=0.1)
    timer.cancel()
