from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from clickergame.deps import get_gateway, get_store
from clickergame.services.broadcast import PushGateway
from clickergame.storage.base import DocumentStore

router = APIRouter()


@router.websocket("/")
async def price_feed(
    websocket: WebSocket,
    gateway: PushGateway = Depends(get_gateway),
    store: DocumentStore = Depends(get_store),
):
    """Push channel: initial snapshot on connect, then every price tick."""
    if not await gateway.connect(websocket, store):
        return
    try:
        while True:
            # no client messages are defined; reading keeps disconnects visible
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await gateway.disconnect(websocket)
