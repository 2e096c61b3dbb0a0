import asyncio
from datetime import datetime

import pytest

from liverisk.schemas.risk import Tick
from liverisk.services.base import QueueFullError
from liverisk.services.feed import MockTickFeed, QueueTickFeed, ReplayTickFeed

SEEDS = {"AAPL": 175.12, "MSFT": 360.80, "TSLA": 250.30, "GOOGL": 132.45}


def test_mock_ticks_are_reproducible_with_a_seed():
    a = MockTickFeed(SEEDS, seed=42)
    b = MockTickFeed(SEEDS, seed=42)
    assert [(t.symbol, t.price) for t in (a.next_tick() for _ in range(20))] == [
        (t.symbol, t.price) for t in (b.next_tick() for _ in range(20))
    ]


def test_mock_ticks_move_within_bounds():
    feed = MockTickFeed(SEEDS, max_change_pct=1.5, seed=1)
    last = dict(SEEDS)
    for _ in range(500):
        tick = feed.next_tick()
        assert tick.symbol in SEEDS
        assert tick.price == round(tick.price, 2)
        # Rounding to cents can add at most half a cent beyond 1.5%
        assert abs(tick.price - last[tick.symbol]) <= last[tick.symbol] * 0.015 + 0.005 + 1e-9
        datetime.fromisoformat(tick.timestamp)
        last[tick.symbol] = tick.price


def test_mock_feed_reads_engine_prices():
    feed = MockTickFeed({"AAPL": 100.0}, max_change_pct=0.0, seed=3, price_source=lambda s: 200.0)
    assert feed.next_tick().price == 200.0


def test_mock_feed_needs_instruments():
    with pytest.raises(ValueError):
        MockTickFeed({})


async def test_mock_feed_streams_until_closed_and_restarts():
    feed = MockTickFeed(SEEDS, interval_ms=1, seed=5)

    received = []
    async for tick in feed.ticks():
        received.append(tick)
        if len(received) == 3:
            await feed.close()
    assert len(received) == 3
    assert feed.closed

    # Reconnect: a fresh stream starts delivering again
    stream = feed.ticks()
    tick = await asyncio.wait_for(stream.__anext__(), timeout=1)
    assert tick.symbol in SEEDS
    await feed.close()
    await stream.aclose()


async def test_replay_feed_delivers_in_order():
    ticks = [Tick(symbol="AAPL", price=p, timestamp=f"t{i}") for i, p in enumerate((1.0, 2.0, 3.0))]
    feed = ReplayTickFeed(ticks)

    assert [t.price async for t in feed.ticks()] == [1.0, 2.0, 3.0]
    # Replays from the start on every call
    assert [t.timestamp async for t in feed.ticks()] == ["t0", "t1", "t2"]
    assert len(feed) == 3


async def test_replay_feed_stops_on_close():
    feed = ReplayTickFeed([Tick(symbol="AAPL", price=float(p)) for p in range(1, 10)])
    received = []
    async for tick in feed.ticks():
        received.append(tick)
        await feed.close()
    assert len(received) == 1


async def test_queue_feed_delivers_pushed_ticks_until_closed():
    feed = QueueTickFeed(maxsize=10)
    await feed.push(Tick(symbol="AAPL", price=1.0))
    feed.push_nowait(Tick(symbol="MSFT", price=2.0))
    assert feed.pending == 2

    received = []
    async for tick in feed.ticks():
        received.append(tick.symbol)
        if len(received) == 2:
            await feed.close()
    assert received == ["AAPL", "MSFT"]
    assert feed.closed
    assert feed.pending == 0


async def test_queue_feed_close_wakes_idle_consumer():
    feed = QueueTickFeed()

    async def consume():
        return [t async for t in feed.ticks()]

    consumer = asyncio.create_task(consume())
    await asyncio.sleep(0)
    await feed.close()
    assert await asyncio.wait_for(consumer, timeout=1) == []


async def test_queue_feed_restarts_with_ticks_pushed_while_closed():
    feed = QueueTickFeed()
    await feed.close()
    feed.push_nowait(Tick(symbol="TSLA", price=3.0))
    assert feed.pending == 1

    stream = feed.ticks()
    tick = await asyncio.wait_for(stream.__anext__(), timeout=1)
    assert tick.symbol == "TSLA"
    assert not feed.closed
    await feed.close()
    await stream.aclose()


async def test_queue_feed_push_nowait_raises_when_full():
    feed = QueueTickFeed(maxsize=1)
    feed.push_nowait(Tick(symbol="AAPL", price=1.0))
    with pytest.raises(QueueFullError):
        feed.push_nowait(Tick(symbol="AAPL", price=2.0))
    assert feed.pending == 1

    with pytest.raises(ValueError):
        QueueTickFeed(maxsize=0)
