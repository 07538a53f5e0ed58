import logging

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from opsflow.auth.security import decode_access_token
from opsflow.notifications.broadcaster import connection_manager

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Notifications"])


@router.websocket("/ws/notifications")
async def notifications_socket(websocket: WebSocket, token: str = Query(...)):
    """Abonne le client aux événements de son tenant (ex: ``invoice:created``)."""
    actor = decode_access_token(token)
    if actor is None or actor.tenant_id is None:
        logger.warning("Connexion WebSocket refusée: token invalide ou sans tenant.")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await connection_manager.connect(websocket, actor.tenant_id)
    try:
        while True:
            text = await websocket.receive_text()
            if text == "ping":
                await websocket.send_text("pong")
    except WebSocketDisconnect:
        connection_manager.disconnect(websocket, actor.tenant_id)
