import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# In-memory store, cheap hashing, no background ticker
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("PRICE_TICKER_ENABLED", "false")
os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-characters-long")


@pytest.fixture
def store():
    from clickergame.storage.memory import MemoryStore
    return MemoryStore()


@pytest.fixture
def gateway():
    from clickergame.services.broadcast import PushGateway
    return PushGateway(send_timeout=0.2)


@pytest.fixture
def app(store, gateway):
    from clickergame.main import create_app
    return create_app(store=store, gateway=gateway)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def logged_in(client) -> AsyncClient:
    """Client holding a session for a fresh 'alice' account."""
    r = await client.post("/register", json={"username": "alice", "password": "secret"})
    assert r.status_code == 201
    r = await client.post("/login", json={"username": "alice", "password": "secret"})
    assert r.status_code == 200
    return client
