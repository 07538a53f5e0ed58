from typing import Annotated

from fastapi import Depends

from opsflow.notifications.broadcaster import AbstractBroadcaster, WebSocketBroadcaster, connection_manager


def get_broadcaster() -> AbstractBroadcaster:
    """Fournit le diffuseur WebSocket partagé par l'application."""
    return WebSocketBroadcaster(manager=connection_manager)

BroadcasterDep = Annotated[AbstractBroadcaster, Depends(get_broadcaster)]
