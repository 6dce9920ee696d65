from __future__ import annotations

import asyncio
import json

import pytest
from websockets.asyncio.server import serve
from websockets.exceptions import ConnectionClosed

from remote_client.runtime.dispatcher import CommandDispatcher
from remote_client.runtime.notifications import DedupGate
from remote_client.services.connection import ConnectionManager
from remote_client.services.schemas import Command, Phase
from remote_client.state.reducer import StateReducer


@pytest.mark.asyncio
async def test_real_server_round_trip_and_reconnect(state, notifier):
    received: asyncio.Queue[str] = asyncio.Queue()
    sessions = 0

    async def handler(websocket):
        nonlocal sessions
        sessions += 1
        await websocket.send("ON")
        try:
            await received.put(await websocket.recv())
        except ConnectionClosed:
            return
        await websocket.close()

    async with serve(handler, "127.0.0.1", 0) as server:
        port = server.sockets[0].getsockname()[1]
        gate = DedupGate(notifier)
        reducer = StateReducer(state, gate.notify)
        connection = ConnectionManager(
            f"ws://127.0.0.1:{port}",
            state=state,
            notify=gate.notify,
            on_envelope=reducer.apply,
            reconnect_delay=0.05,
        )
        dispatcher = CommandDispatcher(connection, state, gate.notify)

        connection.start()
        await connection.wait_open(timeout=5)
        for _ in range(100):
            if state.device_state == "ON":
                break
            await asyncio.sleep(0.01)
        assert state.device_state == "ON"

        assert await dispatcher.dispatch(Command.OFF) is True
        assert json.loads(await asyncio.wait_for(received.get(), 5)) == {"command": "OFF"}

        for _ in range(200):
            if sessions >= 2 and connection.phase is Phase.OPEN:
                break
            await asyncio.sleep(0.02)
        assert sessions >= 2
        assert "Reconnecting to appliance server..." in notifier.texts

        await connection.close()
        assert connection.phase is Phase.CLOSED
