from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from clickergame.core.config import get_settings
from clickergame.core.security import SESSION_COOKIE_NAME, create_session_token
from clickergame.deps import get_store
from clickergame.services import users as user_service
from clickergame.storage.base import DocumentStore

router = APIRouter()


class CredentialsRequest(BaseModel):
    username: str = ""
    password: str = ""


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: CredentialsRequest, store: DocumentStore = Depends(get_store)):
    user_id = await user_service.register(store, body.username, body.password)
    return {"message": "Registered", "id": user_id}


@router.post("/login")
async def login(body: CredentialsRequest, response: Response, store: DocumentStore = Depends(get_store)):
    """Check credentials and set the httpOnly session cookie."""
    user = await user_service.authenticate(store, body.username, body.password)
    max_age = get_settings().session_max_age_seconds
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user.id),
        max_age=max_age,
        httponly=True,
        secure=False,  # set True in prod with HTTPS
        samesite="lax",
        path="/",
    )
    return {"message": "Logged in"}


@router.post("/logout")
async def logout(response: Response):
    """Clear the session cookie. The token itself stays valid until it expires."""
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
    return {"message": "Logged out"}
