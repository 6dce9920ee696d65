from __future__ import annotations

import asyncio
import json
from dataclasses import asdict
from typing import Optional

import typer

from .config.settings import AppSettings
from .config.store import load_settings, save_settings, settings_path
from .logger import configure_logging
from .runtime.dispatcher import CommandDispatcher
from .runtime.notifications import DedupGate
from .services.connection import ConnectionManager, Connector
from .services.schemas import Command, Severity
from .state.app_state import AppState
from .state.reducer import StateReducer

cli = typer.Typer(name="remote-client", help="Remote appliance control client")
config_cli = typer.Typer(help="Configuration")

cli.add_typer(config_cli, name="config")

_COLORS = {
    Severity.SUCCESS: typer.colors.GREEN,
    Severity.INFO: typer.colors.BLUE,
    Severity.WARNING: typer.colors.YELLOW,
    Severity.ERROR: typer.colors.RED,
}


class ConsoleNotifier:
    """Print notifications to the terminal, coloured by severity."""

    def display(self, message: str, severity: Severity) -> None:
        typer.secho(f"[{severity.value}] {message}", fg=_COLORS.get(severity), err=severity is Severity.ERROR)


def _settings(url: Optional[str]) -> AppSettings:
    settings = load_settings()
    if url:
        settings.server.url = url
    configure_logging(settings.logging)
    return settings


def _build(settings: AppSettings, connector: Optional[Connector] = None) -> tuple[ConnectionManager, CommandDispatcher]:
    state = AppState(settings=settings)
    gate = DedupGate(ConsoleNotifier())
    reducer = StateReducer(state, gate.notify)
    connection = ConnectionManager(
        settings.server.url,
        state=state,
        notify=gate.notify,
        on_envelope=reducer.apply,
        reconnect_delay=settings.server.reconnect_delay,
        connector=connector,
    )
    return connection, CommandDispatcher(connection, state, gate.notify)


async def _watch(settings: AppSettings) -> None:
    connection, _ = _build(settings)
    connection.start()
    try:
        await asyncio.Event().wait()
    finally:
        await connection.close()


async def _send_once(
    settings: AppSettings,
    command: Command,
    timeout: float,
    connector: Optional[Connector] = None,
) -> bool:
    connection, dispatcher = _build(settings, connector)
    connection.start()
    try:
        await connection.wait_open(timeout)
    except asyncio.TimeoutError:
        pass  # the dispatcher reports the closed connection
    try:
        return await dispatcher.dispatch(command)
    finally:
        await connection.close()


@cli.command()
def ui() -> None:
    """Open the desktop control window."""
    from .app import run

    raise typer.Exit(code=run())


@cli.command()
def watch(url: Optional[str] = typer.Option(None, "--url", help="Endpoint WebSocket URL")) -> None:
    """Stay connected and print every notification until interrupted."""
    settings = _settings(url)
    typer.echo(f"Watching {settings.server.url} (Ctrl+C to stop)")
    try:
        asyncio.run(_watch(settings))
    except KeyboardInterrupt:
        typer.echo("Stopped.")


@cli.command()
def send(
    command: str = typer.Argument(..., help="ON or OFF"),
    url: Optional[str] = typer.Option(None, "--url", help="Endpoint WebSocket URL"),
    timeout: float = typer.Option(10.0, "--timeout", help="Seconds to wait for the connection"),
) -> None:
    """Send a single command and exit."""
    try:
        parsed = Command(command.strip().upper())
    except ValueError:
        raise typer.BadParameter("expected ON or OFF", param_hint="COMMAND") from None
    settings = _settings(url)
    if not asyncio.run(_send_once(settings, parsed, timeout)):
        raise typer.Exit(code=1)


@config_cli.command("show")
def config_show() -> None:
    typer.echo(json.dumps(asdict(load_settings()), indent=2))


@config_cli.command("path")
def config_path() -> None:
    typer.echo(str(settings_path()))


@config_cli.command("set-url")
def config_set_url(url: str) -> None:
    if not url.startswith(("ws://", "wss://")):
        raise typer.BadParameter("URL must start with ws:// or wss://", param_hint="URL")
    settings = load_settings()
    settings.server.url = url
    path = save_settings(settings)
    typer.echo(f"Endpoint set to {url} ({path})")


def main() -> None:
    cli()
