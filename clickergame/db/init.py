from clickergame.core.config import get_settings
from clickergame.core.exceptions import ConflictError
from clickergame.core.logging import get_logger
from clickergame.services import users as user_service
from clickergame.storage.base import DocumentStore

log = get_logger(__name__)


async def init_db(store: DocumentStore) -> None:
    """Materialize the seed document and, if configured, the demo account."""
    document = await store.load()
    log.info("document_ready", users=len(document.users), stocks=len(document.stocks))
    settings = get_settings()
    if settings.demo_username and settings.demo_password:
        try:
            user_id = await user_service.register(store, settings.demo_username, settings.demo_password)
            log.info("demo_account_created", user_id=user_id, username=settings.demo_username)
        except ConflictError:
            pass
