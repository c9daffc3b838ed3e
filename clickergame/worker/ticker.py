"""Background task that drives the price simulation on a fixed interval."""

import asyncio
import random

from clickergame.core.logging import get_logger
from clickergame.services.broadcast import PushGateway
from clickergame.services.prices import run_price_tick
from clickergame.storage.base import DocumentStore

log = get_logger(__name__)


class PriceTicker:
    def __init__(
        self,
        store: DocumentStore,
        gateway: PushGateway,
        interval_seconds: float,
        rng: random.Random | None = None,
    ):
        self.store = store
        self.gateway = gateway
        self.interval_seconds = interval_seconds
        self.rng = rng
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="price-ticker")
        log.info("price_ticker_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        log.info("price_ticker_stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await run_price_tick(self.store, self.gateway, self.rng)
            except Exception:
                log.exception("price_tick_failed")
