from clickergame.core.config import get_settings
from clickergame.core.exceptions import ConflictError, UnauthorizedError, ValidationError
from clickergame.core.logging import get_logger
from clickergame.core.security import BCRYPT_MAX_PASSWORD_BYTES, hash_password, verify_password
from clickergame.models import User
from clickergame.storage.base import DocumentStore

log = get_logger(__name__)


def _require_credentials(username: str | None, password: str | None) -> None:
    if not username or not password:
        raise ValidationError("Username and password are required")


async def register(store: DocumentStore, username: str | None, password: str | None) -> int:
    """Create an account with the starting balance and income; return its id.

    Hashing happens outside the store lock; uniqueness is checked again inside
    the transaction so a racing registration cannot claim the same name.
    """
    _require_credentials(username, password)
    if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_PASSWORD_BYTES} bytes")

    snapshot = await store.load()
    if snapshot.find_user_by_username(username):
        raise ConflictError("Username already taken")

    password_hash = await hash_password(password)
    settings = get_settings()
    async with store.transaction() as document:
        if document.find_user_by_username(username):
            raise ConflictError("Username already taken")
        user = User(
            id=document.allocate_id("user"),
            username=username,
            password_hash=password_hash,
            balance=settings.starting_balance,
            income_per_click=settings.starting_income_per_click,
            auto_income_per_second=settings.starting_auto_income_per_second,
        )
        document.users.append(user)
    log.info("user_registered", user_id=user.id, username=username)
    return user.id


async def authenticate(store: DocumentStore, username: str | None, password: str | None) -> User:
    """Return the user whose credentials match, else raise UnauthorizedError."""
    _require_credentials(username, password)
    document = await store.load()
    user = document.find_user_by_username(username)
    if user is None or not await verify_password(password, user.password_hash):
        log.info("login_failed", username=username)
        raise UnauthorizedError("Invalid username or password")
    log.info("user_login", user_id=user.id)
    return user
