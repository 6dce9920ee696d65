"""Wires connection, state and voice handling on a single event loop."""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import CancelledError as FutureCancelledError
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Coroutine, Optional

from ..audio.recognizer import SpeechRecognizer, VoiceSessionCallbacks, WhisperRecognizer
from ..services.connection import ConnectionManager, Connector
from ..services.errors import UnrecognizedIntentError, UnsupportedCapabilityError
from ..services.schemas import Command, Severity
from ..state.app_state import AppState
from ..state.reducer import StateReducer
from .dispatcher import CommandDispatcher
from .intent import resolve_command
from .notifications import DedupGate, Notifier

LOGGER = logging.getLogger(__name__)

UNSUPPORTED_VOICE_MESSAGE = "Voice recognition is not supported on this system."


class RemoteController:
    """High-level coordinator for the remote client.

    Connection, device state and the notification gate are only touched from
    ``self.loop``. Without an explicit loop the controller runs its own in a
    daemon thread and UI callers go through the thread-safe entry points.
    """

    def __init__(
        self,
        state: AppState,
        notifier: Notifier,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        recognizer: Optional[SpeechRecognizer] = None,
        connector: Optional[Connector] = None,
    ) -> None:
        self.state = state
        if loop is not None:
            self.loop = loop
            self._owns_loop = False
            self._loop_thread: Optional[threading.Thread] = None
        else:
            self.loop = asyncio.new_event_loop()
            self._owns_loop = True
            self._loop_thread = threading.Thread(target=self._run_loop, name="remote-loop", daemon=True)
            self._loop_thread.start()

        settings = state.settings
        self.gate = DedupGate(notifier)
        self.reducer = StateReducer(state, self.gate.notify)
        self.connection = ConnectionManager(
            settings.server.url,
            state=state,
            notify=self.gate.notify,
            on_envelope=self.reducer.apply,
            reconnect_delay=settings.server.reconnect_delay,
            connector=connector,
        )
        self.dispatcher = CommandDispatcher(self.connection, state, self.gate.notify)
        self.recognizer: SpeechRecognizer = recognizer if recognizer is not None else WhisperRecognizer(settings.voice)

        self._voice_lock = threading.Lock()
        self._voice_active = False
        self._transcript_task: Optional[asyncio.Task[Optional[Command]]] = None

    # ------------------------------------------------------------------ #
    # Public API (thread-safe)
    # ------------------------------------------------------------------ #
    def start(self) -> None:
        """Open the connection; reconnection is automatic afterwards."""
        self.loop.call_soon_threadsafe(self.connection.start)

    def turn_on(self) -> Future[bool]:
        return self._submit(self.dispatcher.dispatch(Command.ON))

    def turn_off(self) -> Future[bool]:
        return self._submit(self.dispatcher.dispatch(Command.OFF))

    def start_listening(self) -> bool:
        """Start a voice session; return False when none was started."""
        with self._voice_lock:
            if self._voice_active:
                LOGGER.info("Voice session already active; request ignored")
                return False
            self._voice_active = True

        callbacks = VoiceSessionCallbacks(
            on_start=lambda: self._call(self._on_voice_start),
            on_result=lambda text: self._call(self._on_voice_result, text),
            on_error=lambda exc: self._call(self._on_voice_error, exc),
            on_end=lambda: self._call(self._on_voice_end),
        )
        try:
            self.recognizer.start_session(callbacks)
        except UnsupportedCapabilityError as exc:
            LOGGER.warning("Voice capability unavailable: %s", exc)
            self._release_voice()
            self._call(self.gate.notify, UNSUPPORTED_VOICE_MESSAGE, Severity.ERROR)
            return False
        except RuntimeError as exc:
            LOGGER.warning("Voice session refused: %s", exc)
            self._release_voice()
            return False
        return True

    async def handle_transcript(self, transcript: str) -> Optional[Command]:
        """Act on a final transcript; return the dispatched command if any."""
        self.state.transcript = transcript
        self.gate.notify(f'Recognized: "{transcript}"', Severity.INFO)
        try:
            command = resolve_command(transcript)
        except UnrecognizedIntentError as exc:
            self.gate.notify(f'Unknown command: "{exc.transcript}"', Severity.WARNING)
            return None
        await self.dispatcher.dispatch(command)
        return command

    async def aclose(self) -> None:
        """Tear down the connection; no reconnect fires afterwards."""
        await self.connection.close()

    def shutdown(self) -> None:
        """Release the connection and stop the owned loop."""
        future = asyncio.run_coroutine_threadsafe(self.aclose(), self.loop)
        try:
            future.result(timeout=2)
        except (FutureTimeoutError, FutureCancelledError) as exc:
            LOGGER.warning("Connection teardown did not finish: %r", exc)
        if self._owns_loop and self._loop_thread:
            self.loop.call_soon_threadsafe(self.loop.stop)
            self._loop_thread.join(timeout=1)
            self._loop_thread = None

    # ------------------------------------------------------------------ #
    # Voice session events (run on the loop)
    # ------------------------------------------------------------------ #
    def _on_voice_start(self) -> None:
        self.state.listening = True
        self.state.transcript = "Listening..."
        self.gate.notify("Listening for voice command...", Severity.INFO)

    def _on_voice_result(self, transcript: str) -> None:
        self._transcript_task = self.loop.create_task(self.handle_transcript(transcript))

    def _on_voice_error(self, exc: Exception) -> None:
        LOGGER.error("Speech recognition error: %s", exc)
        self.state.listening = False
        self.state.transcript = "Error recognizing voice."
        self.gate.notify("Voice recognition error!", Severity.ERROR)

    def _on_voice_end(self) -> None:
        self.state.listening = False
        task, self._transcript_task = self._transcript_task, None
        if task is not None and not task.done():
            task.add_done_callback(lambda _: self._finish_voice())
        else:
            self._finish_voice()

    def _finish_voice(self) -> None:
        self._release_voice()
        self.gate.notify("Stopped listening.", Severity.INFO)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _release_voice(self) -> None:
        with self._voice_lock:
            self._voice_active = False

    def _call(self, callback: Callable[..., Any], *args: Any) -> None:
        self.loop.call_soon_threadsafe(callback, *args)

    def _submit(self, coroutine: Coroutine[Any, Any, Any]) -> Future[Any]:
        future = asyncio.run_coroutine_threadsafe(coroutine, self.loop)
        future.add_done_callback(self._log_failure)
        return future

    @staticmethod
    def _log_failure(future: Future[Any]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            LOGGER.error("Background task failed: %r", exc)

    def _run_loop(self) -> None:
        asyncio.set_event_loop(self.loop)
        self.loop.run_forever()
