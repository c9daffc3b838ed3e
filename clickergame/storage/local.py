import os
from pathlib import Path

import aiofiles
import aiofiles.os
import orjson
from pydantic import ValidationError as SchemaError

from clickergame.core.exceptions import InternalError
from clickergame.core.logging import get_logger
from clickergame.models import GameDocument
from clickergame.storage.base import DocumentStore

log = get_logger(__name__)


class LocalJsonStore(DocumentStore):
    """Document kept as one pretty-printed JSON file on local disk."""

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    async def read(self) -> GameDocument | None:
        if not await aiofiles.os.path.exists(self.path):
            return None
        try:
            async with aiofiles.open(self.path, "rb") as f:
                raw = await f.read()
            return GameDocument.model_validate(orjson.loads(raw))
        except (OSError, orjson.JSONDecodeError, SchemaError) as e:
            log.error("document_read_failed", path=str(self.path), reason=str(e))
            raise InternalError("Document store unavailable") from e

    async def write(self, document: GameDocument) -> None:
        body = orjson.dumps(document.model_dump(mode="json", by_alias=True), option=orjson.OPT_INDENT_2)
        tmp_path = self.path.with_name(f"{self.path.name}.{os.getpid()}.tmp")
        try:
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(body)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            log.error("document_write_failed", path=str(self.path), reason=str(e))
            raise InternalError("Document store unavailable") from e
