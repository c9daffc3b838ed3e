from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from clickergame.deps import Session, get_session, get_store
from clickergame.services import economy
from clickergame.storage.base import DocumentStore

router = APIRouter()


class BuyStockRequest(BaseModel):
    stock_id: int = Field(alias="stockId")
    # quoted by the client and validated by the economy service; ignored when client prices are not trusted
    price: Any = None


@router.get("/stocks")
async def list_stocks(session: Session = Depends(get_session)):
    return [s.model_dump() for s in session.document.stocks]


@router.post("/buy-stock")
async def buy_stock(
    body: BuyStockRequest,
    session: Session = Depends(get_session),
    store: DocumentStore = Depends(get_store),
):
    holding = await economy.purchase_stock(store, session.user_id, body.stock_id, body.price)
    return {"message": "Stock purchased", "quantity": holding.quantity}


@router.get("/investments")
async def list_investments(session: Session = Depends(get_session)):
    """Current user's holdings joined with live symbol, name and price."""
    return [h.model_dump() for h in economy.list_holdings(session.document, session.user_id)]
