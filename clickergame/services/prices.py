"""Synthetic random-walk pricing for the stock catalog."""

import random

from clickergame.core.config import get_settings
from clickergame.core.logging import get_logger
from clickergame.models import Stock
from clickergame.services.broadcast import PRICE_UPDATE, PushGateway, prices_message
from clickergame.storage.base import DocumentStore

log = get_logger(__name__)


def perturb_price(
    price: float,
    rng: random.Random | None = None,
    max_delta: float | None = None,
    floor: float | None = None,
) -> float:
    """Shift ``price`` by a uniform delta in [-max_delta, max_delta], floor it, round to cents."""
    settings = get_settings()
    rng = rng or random
    max_delta = settings.price_max_delta if max_delta is None else max_delta
    floor = settings.price_floor if floor is None else floor
    new_price = max(price + rng.uniform(-max_delta, max_delta), floor)
    return max(round(new_price, 2), floor)


async def run_price_tick(
    store: DocumentStore,
    gateway: PushGateway | None = None,
    rng: random.Random | None = None,
) -> list[Stock]:
    """Move every stock price once, persist the catalog, and hand it to the gateway."""
    async with store.transaction() as document:
        for stock in document.stocks:
            stock.price = perturb_price(stock.price, rng)
        stocks = [s.model_copy() for s in document.stocks]
    log.debug("price_tick", prices={s.symbol: s.price for s in stocks})
    if gateway is not None:
        gateway.publish(prices_message(PRICE_UPDATE, [s.model_dump() for s in stocks]))
    return stocks
