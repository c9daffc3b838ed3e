from clickergame.models import GameDocument
from clickergame.storage.base import DocumentStore


class MemoryStore(DocumentStore):
    """Keeps the serialized document in memory; nothing survives the process."""

    def __init__(self) -> None:
        super().__init__()
        self._raw: bytes | None = None

    async def read(self) -> GameDocument | None:
        if self._raw is None:
            return None
        return GameDocument.model_validate_json(self._raw)

    async def write(self, document: GameDocument) -> None:
        self._raw = document.model_dump_json(by_alias=True).encode("utf-8")
