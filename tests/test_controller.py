from __future__ import annotations

import asyncio
import json

import pytest

from conftest import settle
from remote_client.audio.recognizer import VoiceSessionCallbacks
from remote_client.runtime.controller import UNSUPPORTED_VOICE_MESSAGE, RemoteController
from remote_client.services.errors import UnsupportedCapabilityError
from remote_client.services.schemas import Command, Phase, Severity


class FakeRecognizer:
    """Recognizer whose events are fired by the test."""

    def __init__(self, *, supported: bool = True) -> None:
        self.supported = supported
        self.sessions: list[VoiceSessionCallbacks] = []

    def start_session(self, callbacks: VoiceSessionCallbacks) -> None:
        if not self.supported:
            raise UnsupportedCapabilityError("no microphone")
        self.sessions.append(callbacks)


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def make_controller(state, notifier, connector, recognizer):
    def _make() -> RemoteController:
        return RemoteController(
            state,
            notifier,
            loop=asyncio.get_running_loop(),
            recognizer=recognizer,
            connector=connector,
        )

    return _make


async def _open(controller: RemoteController) -> None:
    controller.start()
    await settle()
    await controller.connection.wait_open(timeout=1)


@pytest.mark.asyncio
async def test_buttons_send_over_live_connection(make_controller, connector, notifier) -> None:
    controller = make_controller()
    await _open(controller)
    assert await asyncio.wrap_future(controller.turn_on()) is True
    assert await asyncio.wrap_future(controller.turn_off()) is True
    assert [json.loads(frame)["command"] for frame in connector.latest.sent] == ["ON", "OFF"]
    assert notifier.texts[-2:] == ["Command sent: ON", "Command sent: OFF"]
    await controller.aclose()


@pytest.mark.asyncio
async def test_voice_session_dispatches_recognized_command(make_controller, recognizer, connector, notifier, state) -> None:
    controller = make_controller()
    await _open(controller)

    assert controller.start_listening() is True
    session = recognizer.sessions[-1]
    session.on_start()
    await settle()
    assert state.listening is True
    assert state.transcript == "Listening..."

    session.on_result("please turn on the light")
    session.on_end()
    await settle()

    assert state.listening is False
    assert state.transcript == "please turn on the light"
    assert [json.loads(frame) for frame in connector.latest.sent] == [{"command": "ON"}]
    assert notifier.texts[-4:] == [
        "Listening for voice command...",
        'Recognized: "please turn on the light"',
        "Command sent: ON",
        "Stopped listening.",
    ]
    await controller.aclose()


@pytest.mark.asyncio
async def test_unknown_transcript_warns_without_sending(make_controller, connector, notifier) -> None:
    controller = make_controller()
    await _open(controller)

    assert await controller.handle_transcript("do a barrel roll") is None
    assert connector.latest.sent == []
    assert notifier.messages[-1] == ('Unknown command: "do a barrel roll"', Severity.WARNING)
    await controller.aclose()


@pytest.mark.asyncio
async def test_voice_command_while_disconnected_is_dropped(make_controller, notifier) -> None:
    controller = make_controller()
    assert await controller.handle_transcript("turn off") is Command.OFF
    assert notifier.texts[-1] == "Not connected to appliance server!"
    assert controller.connection.phase is Phase.IDLE


@pytest.mark.asyncio
async def test_second_session_is_ignored_while_active(make_controller, recognizer) -> None:
    controller = make_controller()
    assert controller.start_listening() is True
    assert controller.start_listening() is False
    assert len(recognizer.sessions) == 1

    recognizer.sessions[0].on_end()
    await settle()
    assert controller.start_listening() is True
    assert len(recognizer.sessions) == 2


@pytest.mark.asyncio
async def test_unsupported_voice_is_reported(state, notifier, connector) -> None:
    recognizer = FakeRecognizer(supported=False)
    controller = RemoteController(
        state,
        notifier,
        loop=asyncio.get_running_loop(),
        recognizer=recognizer,
        connector=connector,
    )
    assert controller.start_listening() is False
    await settle()
    assert notifier.messages == [(UNSUPPORTED_VOICE_MESSAGE, Severity.ERROR)]
    assert state.listening is False


@pytest.mark.asyncio
async def test_recognition_error_resets_listening(make_controller, recognizer, notifier, state) -> None:
    controller = make_controller()
    controller.start_listening()
    session = recognizer.sessions[-1]
    session.on_start()
    session.on_error(RuntimeError("microphone unplugged"))
    session.on_end()
    await settle()
    assert state.listening is False
    assert state.transcript == "Error recognizing voice."
    assert notifier.texts[-2:] == ["Voice recognition error!", "Stopped listening."]


@pytest.mark.asyncio
async def test_aclose_stops_reconnecting(make_controller, connector) -> None:
    controller = make_controller()
    await _open(controller)
    connector.latest.drop()
    await settle()
    await controller.aclose()
    await asyncio.sleep(0.15)
    assert connector.calls == 1
