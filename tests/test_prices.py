"""Price random walk and the tick that persists and publishes it."""

import asyncio
import random

import pytest

from clickergame.services.broadcast import PushGateway
from clickergame.services.prices import perturb_price, run_price_tick
from clickergame.worker.ticker import PriceTicker


class FixedRng:
    """Always draws the given end of the range."""

    def __init__(self, sign: float):
        self.sign = sign

    def uniform(self, a, b):
        return b if self.sign > 0 else a


class RecordingGateway(PushGateway):
    def __init__(self):
        super().__init__(send_timeout=0.1)
        self.published = []

    def publish(self, message):
        self.published.append(message)


def test_perturb_price_bounded_and_rounded():
    rng = random.Random(7)
    for _ in range(1000):
        new = perturb_price(10.0, rng)
        assert 9.75 <= new <= 10.25
        assert new == round(new, 2)


def test_perturb_price_never_below_floor():
    rng = random.Random(1)
    price = 0.5
    for _ in range(500):
        price = perturb_price(price, rng)
        assert price >= 0.01
    assert perturb_price(0.01, FixedRng(-1)) == 0.01
    assert perturb_price(0.2, FixedRng(-1)) == 0.01


def test_perturb_price_max_step_up():
    assert perturb_price(80.0, FixedRng(1)) == 80.25


@pytest.mark.asyncio
async def test_tick_persists_and_publishes(store):
    gateway = RecordingGateway()
    stocks = await run_price_tick(store, gateway, FixedRng(-1))
    assert [s.price for s in stocks] == [49999.75, 2499.75, 119.75, 79.75, 0.25]

    doc = await store.load()
    assert [s.price for s in doc.stocks] == [49999.75, 2499.75, 119.75, 79.75, 0.25]
    assert len(gateway.published) == 1
    message = gateway.published[0]
    assert message["type"] == "price-update"
    assert [s["price"] for s in message["data"]] == [49999.75, 2499.75, 119.75, 79.75, 0.25]
    assert set(message["data"][0]) == {"id", "symbol", "name", "price"}


@pytest.mark.asyncio
async def test_repeated_downward_ticks_hit_floor(store):
    for _ in range(3):
        await run_price_tick(store, None, FixedRng(-1))
    doc = await store.load()
    assert doc.find_stock(5).price == 0.01


@pytest.mark.asyncio
async def test_ticker_runs_until_stopped(store):
    gateway = RecordingGateway()
    ticker = PriceTicker(store, gateway, interval_seconds=0.01, rng=FixedRng(1))
    ticker.start()
    assert ticker.running
    for _ in range(100):
        if len(gateway.published) >= 2:
            break
        await asyncio.sleep(0.01)
    await ticker.stop()
    assert not ticker.running
    assert len(gateway.published) >= 2
    assert (await store.load()).find_stock(1).price > 50000.00
