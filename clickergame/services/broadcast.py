"""WebSocket fan-out of stock price snapshots."""

import asyncio
from typing import Any

from fastapi import WebSocket

from clickergame.core.config import get_settings
from clickergame.core.logging import get_logger
from clickergame.storage.base import DocumentStore

log = get_logger(__name__)

INITIAL_PRICES = "initial-prices"
PRICE_UPDATE = "price-update"


def prices_message(kind: str, stocks: list[dict[str, Any]]) -> dict[str, Any]:
    return {"type": kind, "data": stocks}


class PushGateway:
    def __init__(self, send_timeout: float | None = None):
        self.connections: set[WebSocket] = set()
        self.send_timeout = send_timeout if send_timeout is not None else get_settings().broadcast_send_timeout
        self._lock = asyncio.Lock()
        self._pending: set[asyncio.Task] = set()

    async def connect(self, ws: WebSocket, store: DocumentStore) -> bool:
        """Accept, send the current catalog, then start receiving broadcasts.

        The channel joins ``connections`` only after its snapshot is out, so the
        snapshot is always the first message it sees. Returns False, without
        registering, when the snapshot cannot be delivered in time.
        """
        await ws.accept()
        document = await store.load()
        stocks = [s.model_dump() for s in document.stocks]
        try:
            await asyncio.wait_for(ws.send_json(prices_message(INITIAL_PRICES, stocks)), timeout=self.send_timeout)
        except Exception:
            log.info("ws_initial_send_failed")
            return False
        async with self._lock:
            self.connections.add(ws)
        log.info("ws_connected", subscribers=len(self.connections))
        return True

    async def disconnect(self, ws: WebSocket) -> None:
        async with self._lock:
            self.connections.discard(ws)

    async def broadcast(self, message: dict[str, Any]) -> int:
        """Send ``message`` to every open channel; return how many deliveries succeeded."""
        async with self._lock:
            targets = list(self.connections)
        if not targets:
            return 0
        dead: list[WebSocket] = []

        async def send_one(ws: WebSocket) -> None:
            try:
                await asyncio.wait_for(ws.send_json(message), timeout=self.send_timeout)
            except Exception:
                dead.append(ws)

        await asyncio.gather(*(send_one(ws) for ws in targets))

        if dead:
            async with self._lock:
                for ws in dead:
                    self.connections.discard(ws)
            log.info("ws_dropped", count=len(dead), subscribers=len(self.connections))
        return len(targets) - len(dead)

    def publish(self, message: dict[str, Any]) -> asyncio.Task:
        """Schedule a broadcast without waiting for delivery."""
        task = asyncio.create_task(self.broadcast(message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def close(self) -> None:
        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        async with self._lock:
            self.connections.clear()
