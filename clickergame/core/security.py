import asyncio
import hashlib

import bcrypt
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from clickergame.core.config import get_settings

SESSION_COOKIE_NAME = "clicker_session"

# bcrypt ignores (newer releases reject) input past this many bytes
BCRYPT_MAX_PASSWORD_BYTES = 72


def get_session_serializer() -> URLSafeTimedSerializer:
    settings = get_settings()
    return URLSafeTimedSerializer(
        settings.secret_key,
        salt="clicker-session",
        signer_kwargs={"key_derivation": "hmac", "digest_method": hashlib.sha256},
    )


def create_session_token(user_id: int) -> str:
    """Sign a session token that carries only the user id."""
    return get_session_serializer().dumps({"user_id": user_id})


def load_session_token(token: str) -> int | None:
    """Return the user id in ``token``, or None if it is tampered, expired or malformed."""
    serializer = get_session_serializer()
    try:
        payload = serializer.loads(token, max_age=get_settings().session_max_age_seconds)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(payload, dict):
        return None
    user_id = payload.get("user_id")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id < 1:
        return None
    return user_id


def _hash_password_sync(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def _verify_password_sync(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        # malformed stored hash or oversized input
        return False


async def hash_password(password: str) -> str:
    """bcrypt-hash ``password`` in a worker thread so the event loop keeps serving."""
    return await asyncio.to_thread(_hash_password_sync, password, get_settings().bcrypt_rounds)


async def verify_password(password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(_verify_password_sync, password, password_hash)
