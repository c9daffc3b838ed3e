import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import AsyncIterator

from clickergame.core.config import get_settings
from clickergame.core.logging import get_logger
from clickergame.db.seed import seed_document
from clickergame.models import GameDocument

log = get_logger(__name__)


class DocumentStore(ABC):
    """Whole-document persistence: every mutation replaces the entire document.

    ``load`` always returns a fresh copy, so callers never share entities by
    reference. Mutations go through ``transaction``, which serializes every
    load-mutate-save cycle behind one write lock.
    """

    def __init__(self) -> None:
        self._write_lock = asyncio.Lock()

    @abstractmethod
    async def read(self) -> GameDocument | None:
        """Return the persisted document, or None if nothing has been stored yet."""
        ...

    @abstractmethod
    async def write(self, document: GameDocument) -> None:
        """Atomically replace the persisted document."""
        ...

    async def _read_or_seed(self) -> GameDocument:
        # caller holds the write lock
        document = await self.read()
        if document is None:
            document = seed_document()
            await self.write(document)
            log.info("document_seeded", users=0, stocks=len(document.stocks), upgrades=len(document.upgrades))
        return document

    async def load(self) -> GameDocument:
        document = await self.read()
        if document is None:
            async with self._write_lock:
                document = await self._read_or_seed()
        return document

    async def save(self, document: GameDocument) -> None:
        await self.write(document)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[GameDocument]:
        """Load under the write lock, yield for mutation, save on success.

        If the body raises, nothing is written and the exception propagates.
        """
        async with self._write_lock:
            document = await self._read_or_seed()
            yield document
            await self.save(document)


def get_storage() -> DocumentStore:
    settings = get_settings()
    if settings.storage_backend == "memory":
        from clickergame.storage.memory import MemoryStore
        return MemoryStore()
    from clickergame.storage.local import LocalJsonStore
    return LocalJsonStore(settings.data_file)
