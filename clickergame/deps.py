"""Shared FastAPI dependencies."""

from dataclasses import dataclass

from fastapi import Request
from fastapi.requests import HTTPConnection

from clickergame.core.exceptions import UnauthorizedError
from clickergame.core.logging import bind_user_id
from clickergame.core.security import SESSION_COOKIE_NAME, load_session_token
from clickergame.models import GameDocument, User
from clickergame.services.broadcast import PushGateway
from clickergame.storage.base import DocumentStore


@dataclass
class Session:
    user_id: int
    user: User
    document: GameDocument  # snapshot loaded for this request


def get_store(conn: HTTPConnection) -> DocumentStore:
    return conn.app.state.store


def get_gateway(conn: HTTPConnection) -> PushGateway:
    return conn.app.state.gateway


async def get_session(request: Request) -> Session:
    """Dependency: resolve the session cookie to a user and a fresh document snapshot."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise UnauthorizedError("Please log in")
    user_id = load_session_token(token)
    if user_id is None:
        raise UnauthorizedError("Invalid or expired session")
    document = await get_store(request).load()
    user = document.find_user(user_id)
    if user is None:
        raise UnauthorizedError("User not found", clear_session=True)
    bind_user_id(user_id)
    return Session(user_id=user_id, user=user, document=document)
