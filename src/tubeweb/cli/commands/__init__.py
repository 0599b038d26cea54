"""Hooks the browse commands into a Typer app."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from tubeweb.cli.commands import browse
from tubeweb.cli.commands.browse import ServiceFactory
from tubeweb.services.youtube import YouTubeService


def register_commands(app: typer.Typer, console: Console, service_factory: Optional[ServiceFactory] = None) -> None:
    """Register every browse command, defaulting to a real YouTubeService per invocation."""

    browse.register(app, console, service_factory or YouTubeService)

    @app.callback(invoke_without_command=True)
    def main_callback(ctx: typer.Context) -> None:
        """Browse YouTube and YouTube Music from the terminal."""

        if ctx.invoked_subcommand is None:
            console.print("[bold green]tubeweb CLI ready for commands.[/bold green]")


__all__ = ["ServiceFactory", "register_commands"]
