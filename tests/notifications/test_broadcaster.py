import pytest
from unittest.mock import AsyncMock, MagicMock

from fastapi import WebSocketDisconnect

from opsflow.notifications.broadcaster import ConnectionManager, WebSocketBroadcaster

pytestmark = pytest.mark.asyncio


def _socket(fail: bool = False) -> MagicMock:
    websocket = MagicMock()
    websocket.accept = AsyncMock()
    websocket.send_json = AsyncMock(side_effect=RuntimeError("closed") if fail else None)
    return websocket


async def test_broadcast_targets_only_the_tenant():
    manager = ConnectionManager()
    tenant_socket, other_socket = _socket(), _socket()
    await manager.connect(tenant_socket, 1)
    await manager.connect(other_socket, 2)

    await WebSocketBroadcaster(manager).broadcast("invoice:created", {"id": 5}, tenant_id=1)

    message = tenant_socket.send_json.await_args.args[0]
    assert message["type"] == "invoice:created"
    assert message["data"] == {"id": 5}
    assert "timestamp" in message
    other_socket.send_json.assert_not_awaited()


async def test_dead_socket_is_dropped():
    manager = ConnectionManager()
    dead, alive = _socket(fail=True), _socket()
    await manager.connect(dead, 1)
    await manager.connect(alive, 1)

    await WebSocketBroadcaster(manager).broadcast("invoice:created", {"id": 5}, tenant_id=1)

    assert manager.connections_for(1) == {alive}
    alive.send_json.assert_awaited_once()


async def test_disconnected_socket_does_not_block_other_clients():
    manager = ConnectionManager()
    dead, alive = _socket(), _socket()
    dead.send_json = AsyncMock(side_effect=WebSocketDisconnect(code=1006))
    await manager.connect(dead, 1)
    await manager.connect(alive, 1)

    await WebSocketBroadcaster(manager).broadcast("invoice:created", {"id": 7}, tenant_id=1)

    alive.send_json.assert_awaited_once()
    assert manager.connections_for(1) == {alive}
