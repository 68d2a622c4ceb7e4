import time

from arch_setup.progress import ProgressTicker


def test_ticker_finishes_when_stopped(console) -> None:
    ticker = ProgressTicker("htop", steps=50, interval=0.001, console=console)

    with ticker:
        time.sleep(0.02)

    assert not ticker.is_alive()
    assert ticker.ticks == 50


def test_ticker_parks_below_full_until_stopped(console) -> None:
    ticker = ProgressTicker("htop", steps=3, interval=0.001, console=console)
    ticker.start()
    time.sleep(0.3)

    assert ticker.ticks == 2
    assert ticker.is_alive()

    ticker.stop()
    ticker.join(timeout=2)
    assert ticker.ticks == 3


def test_ticker_needs_at_least_one_step(console) -> None:
    ticker = ProgressTicker("x", steps=0, console=console)
    assert ticker.steps == 1
