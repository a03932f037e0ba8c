"""Mini README: Entry point CLI for the Kantin payment server.

This script exposes a Typer CLI to start the FastAPI application, inspect
the persisted cards, and wipe the card file. Settings come from ``KANTIN_*``
environment variables unless overridden on the command line.
"""

from __future__ import annotations

import typer
import uvicorn

from kantin.configuration import get_settings
from kantin.ledger import KantinLedger
from kantin.logging_utils import configure_root_logger
from kantin.storage import JsonFileStore

cli = typer.Typer(help="Run and administer the Kantin card payment server.")


def _open_ledger() -> KantinLedger:
    settings = get_settings()
    configure_root_logger(settings.log_level)
    return KantinLedger(JsonFileStore(settings.data_file)).open()


@cli.command()
def run(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the FastAPI application using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # 0.0.0.0 is not navigable from a browser; suggest localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        "Starting Kantin payment server on "
        f"{effective_host}:{effective_port}.\n"
        "Open your browser at "
        f"http://{browser_host}:{effective_port}"
        + (
            " (point the card reader at this machine's IP address)."
            if effective_host in {"0.0.0.0", "::"}
            else ""
        )
    )
    uvicorn.run(
        "kantin.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command("list-cards")
def list_cards() -> None:
    """Print every card with its reset-aware balance."""

    ledger = _open_ledger()
    views = ledger.list_cards()
    if not views:
        typer.echo("No cards registered.")
        return
    for view in views:
        marker = " (reset due)" if view.needs_reset else ""
        typer.echo(
            f"{view.card_id}\t{view.holder_name}\t{view.balance}/{view.daily_allotment}{marker}"
        )


@cli.command()
def wipe(
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    """Delete every registered card."""

    if not yes:
        typer.confirm("This removes every card permanently. Continue?", abort=True)
    outcome = _open_ledger().wipe()
    typer.echo(f"Removed {outcome.removed} cards.")
    if not outcome.persisted:
        typer.echo("Warning: the card file could not be written.", err=True)
        raise typer.Exit(code=1)


if __name__ == "__main__":
    cli()
