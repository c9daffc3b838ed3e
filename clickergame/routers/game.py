from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from clickergame.deps import Session, get_session, get_store
from clickergame.services import economy
from clickergame.storage.base import DocumentStore

router = APIRouter()


class BuyUpgradeRequest(BaseModel):
    upgrade_id: int | None = Field(default=None, alias="upgradeId")


class SaveBalanceRequest(BaseModel):
    # validated by the economy service so strings and booleans are rejected, not coerced
    balance: Any = None


@router.get("/state")
async def get_state(session: Session = Depends(get_session)):
    return economy.game_state(session.user)


@router.post("/click")
async def click(session: Session = Depends(get_session), store: DocumentStore = Depends(get_store)):
    user = await economy.record_click(store, session.user_id)
    return {"message": "Click recorded", "balance": user.balance}


@router.get("/upgrades")
async def list_upgrades(session: Session = Depends(get_session)):
    return [u.model_dump() for u in session.document.upgrades]


@router.post("/buy-upgrade")
async def buy_upgrade(
    body: BuyUpgradeRequest,
    session: Session = Depends(get_session),
    store: DocumentStore = Depends(get_store),
):
    user = await economy.purchase_upgrade(store, session.user_id, body.upgrade_id)
    return {"message": "Upgrade purchased", **economy.game_state(user)}


@router.post("/save-balance")
async def save_balance(
    body: SaveBalanceRequest,
    session: Session = Depends(get_session),
    store: DocumentStore = Depends(get_store),
):
    await economy.sync_balance(store, session.user_id, body.balance)
    return {"message": "Saved"}
