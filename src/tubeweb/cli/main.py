"""Builds the tubeweb Typer app and exposes the console script."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console

from tubeweb.cli.commands import ServiceFactory, register_commands


class CLIApplication:
    """Owns the Typer app, the output console and the service factory used by commands."""

    def __init__(self, console: Optional[Console] = None, service_factory: Optional[ServiceFactory] = None) -> None:
        self.console = console or Console()
        self._app = typer.Typer(add_completion=False, rich_markup_mode="rich", no_args_is_help=False)
        register_commands(self._app, self.console, service_factory)

    @property
    def app(self) -> typer.Typer:
        return self._app

    def run(self, *, prog_name: Optional[str] = None, args: Optional[list[str]] = None) -> None:
        self._app(prog_name=prog_name, args=args)


def create_app(console: Optional[Console] = None, service_factory: Optional[ServiceFactory] = None) -> typer.Typer:
    """Return a wired Typer app; tests pass a console to capture output and a factory to stub the network."""

    return CLIApplication(console=console, service_factory=service_factory).app


def main() -> None:
    CLIApplication().run(prog_name="tubeweb")


__all__ = ["CLIApplication", "create_app", "main"]
