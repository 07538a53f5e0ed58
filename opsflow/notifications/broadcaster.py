"""
Diffusion d'événements temps réel aux clients connectés d'un tenant.
"""
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, DefaultDict, Dict, Set

from fastapi import WebSocket, WebSocketDisconnect

from opsflow.core.dates import utc_now

logger = logging.getLogger(__name__)


class AbstractBroadcaster(ABC):
    """Interface de notification: ``broadcast(eventName, payload, tenantId)``."""

    @abstractmethod
    async def broadcast(self, event_name: str, payload: Dict[str, Any], tenant_id: int) -> None:
        raise NotImplementedError


class ConnectionManager:
    """Connexions WebSocket ouvertes, regroupées par tenant."""

    def __init__(self):
        self._connections: DefaultDict[int, Set[WebSocket]] = defaultdict(set)

    async def connect(self, websocket: WebSocket, tenant_id: int) -> None:
        await websocket.accept()
        self._connections[tenant_id].add(websocket)
        logger.info(f"[ConnectionManager] Client connecté au tenant {tenant_id} ({len(self._connections[tenant_id])} actifs)")

    def disconnect(self, websocket: WebSocket, tenant_id: int) -> None:
        self._connections[tenant_id].discard(websocket)
        if not self._connections[tenant_id]:
            del self._connections[tenant_id]
        logger.info(f"[ConnectionManager] Client déconnecté du tenant {tenant_id}")

    def connections_for(self, tenant_id: int) -> Set[WebSocket]:
        return set(self._connections.get(tenant_id, ()))


class WebSocketBroadcaster(AbstractBroadcaster):
    """Envoie ``{type, data, timestamp}`` à chaque client du tenant."""

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    async def broadcast(self, event_name: str, payload: Dict[str, Any], tenant_id: int) -> None:
        message = {"type": event_name, "data": payload, "timestamp": utc_now().isoformat()}
        sockets = self.manager.connections_for(tenant_id)
        for websocket in sockets:
            try:
                await websocket.send_json(message)
            except (WebSocketDisconnect, RuntimeError, ConnectionError) as e:
                logger.warning(f"[WebSocketBroadcaster] Socket morte retirée (tenant {tenant_id}): {e}")
                self.manager.disconnect(websocket, tenant_id)
        logger.info(f"[WebSocketBroadcaster] Événement '{event_name}' diffusé à {len(sockets)} client(s) du tenant {tenant_id}")


connection_manager = ConnectionManager()
