from __future__ import annotations

from remote_client.services.schemas import DeviceState, InboundEnvelope, Severity
from remote_client.state.app_state import AppState
from remote_client.state.reducer import StateReducer


def test_first_report_changes_state_and_notifies(notifier) -> None:
    state = AppState()
    reducer = StateReducer(state, notifier.display)
    assert reducer.current == DeviceState.UNKNOWN.value

    assert reducer.apply(InboundEnvelope(command="ON")) is True
    assert state.device_state == "ON"
    assert notifier.messages == [("Device is now ON", Severity.INFO)]


def test_repeated_report_is_silent(notifier) -> None:
    reducer = StateReducer(AppState(), notifier.display)
    reducer.apply(InboundEnvelope(command="ON"))
    assert reducer.apply(InboundEnvelope(command="ON")) is False
    assert reducer.current == "ON"
    assert len(notifier.messages) == 1


def test_missing_command_is_ignored(notifier) -> None:
    reducer = StateReducer(AppState(), notifier.display)
    assert reducer.apply(InboundEnvelope()) is False
    assert reducer.current == DeviceState.UNKNOWN.value
    assert notifier.messages == []


def test_arbitrary_reported_values_are_kept(notifier) -> None:
    reducer = StateReducer(AppState(), notifier.display)
    reducer.apply(InboundEnvelope(command="ON"))
    reducer.apply(InboundEnvelope(command="STANDBY"))
    reducer.apply(InboundEnvelope(command="OFF"))
    assert notifier.texts == ["Device is now ON", "Device is now STANDBY", "Device is now OFF"]
