import asyncio

import pytest
from fastapi.websockets import WebSocketState

from chatline.domain.value_objects.user_id import UserId
from chatline.infrastructure.realtime import QueuedWebSocketConnection


class DummySocket:
    def __init__(self, fail=False):
        self.application_state = WebSocketState.CONNECTED
        self.sent = []
        self.fail = fail

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("Cannot call send once a close message has been sent.")
        self.sent.append(data)


async def _settle():
    for _ in range(10):
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_push_is_queued_then_written_in_order():
    socket = DummySocket()
    conn = QueuedWebSocketConnection(UserId("bob"), socket, queue_size=10)

    assert conn.push({"type": "a"})
    assert conn.push({"type": "b"})
    assert socket.sent == []

    conn.start()
    await _settle()
    assert socket.sent == [{"type": "a"}, {"type": "b"}]
    await conn.close()


@pytest.mark.asyncio
async def test_full_queue_drops_instead_of_blocking():
    conn = QueuedWebSocketConnection(UserId("bob"), DummySocket(), queue_size=1)
    assert conn.push({"type": "first"})
    assert conn.push({"type": "second"}) is False
    assert conn.pending() == 1


@pytest.mark.asyncio
async def test_closed_or_dead_socket_refuses_pushes():
    conn = QueuedWebSocketConnection(UserId("bob"), DummySocket(fail=True), queue_size=5)
    conn.start()
    conn.push({"type": "x"})
    await _settle()
    assert conn.closed
    assert conn.push({"type": "y"}) is False

    other = QueuedWebSocketConnection(UserId("bob"), DummySocket(), queue_size=5)
    other.start()
    await other.close()
    assert other.push({"type": "z"}) is False
