import asyncio

import pytest

from courtside.services.chrono import ChronoTicker
from courtside.services.match_state import MatchState
from courtside.store import MatchStore


class StepClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_get_refreshes_expiry_and_drops_idle_matches():
    clock = StepClock()
    store = MatchStore(ttl_seconds=10, clock=clock)
    match = MatchState(match_id="m1")

    async def scenario():
        await store.put(match)
        clock.now = 8
        assert await store.get("m1") is match
        clock.now = 15
        # touched at t=8, so still alive until t=18
        assert await store.get("m1") is match
        clock.now = 40
        assert await store.get("m1") is None
        assert len(store) == 0

    asyncio.run(scenario())


def test_purge_and_delete():
    clock = StepClock()
    store = MatchStore(ttl_seconds=5, clock=clock)

    async def scenario():
        await store.put(MatchState(match_id="a"))
        await store.put(MatchState(match_id="b"))
        assert await store.delete("b") is True
        assert await store.delete("b") is False
        clock.now = 6
        assert await store.purge_expired() == 1
        assert len(store) == 0

    asyncio.run(scenario())


def test_tick_all_skips_paused_matches():
    store = MatchStore()
    running = MatchState(match_id="running")
    finished = MatchState(match_id="done")
    finished.finish_match()

    async def scenario():
        await store.put(running)
        await store.put(finished)
        assert await store.tick_all(1) == 1

    asyncio.run(scenario())
    assert running.chrono_seconds == 1
    assert finished.chrono_seconds == 0


def test_chrono_ticker_runs_until_stopped():
    calls = []

    async def on_tick(seconds):
        calls.append(seconds)

    async def scenario():
        ticker = ChronoTicker(on_tick, interval=0.01)
        ticker.start()
        assert ticker.running
        await asyncio.sleep(0.05)
        await ticker.stop()
        assert not ticker.running

    asyncio.run(scenario())
    assert calls


def test_chrono_ticker_survives_failing_tick(caplog):
    calls = []

    async def on_tick(seconds):
        calls.append(seconds)
        raise RuntimeError("tick broke")

    async def scenario():
        ticker = ChronoTicker(on_tick, interval=0.01)
        ticker.start()
        await asyncio.sleep(0.05)
        await ticker.stop()

    asyncio.run(scenario())
    assert len(calls) >= 2
    assert "chrono tick failed" in caplog.text


@pytest.mark.parametrize(
    "interval, expected",
    [(1.0, [1, 1, 1, 1]), (0.5, [0, 1, 0, 1]), (0.25, [0, 0, 0, 1]), (2.0, [2, 2, 2, 2])],
    ids=["every-second", "half-second", "quarter-second", "two-seconds"],
)
def test_ticker_reports_whole_elapsed_seconds(interval, expected):
    ticker = ChronoTicker(lambda seconds: None, interval=interval)
    assert [ticker.elapsed_seconds() for _ in expected] == expected


def test_fast_ticker_keeps_wall_clock_time():
    store = MatchStore()
    match = MatchState(match_id="m1")
    ticker = ChronoTicker(store.tick_all, interval=0.5)

    async def scenario():
        await store.put(match)
        for _ in range(6):
            seconds = ticker.elapsed_seconds()
            if seconds:
                await store.tick_all(seconds)

    asyncio.run(scenario())
    assert match.chrono_seconds == 3
