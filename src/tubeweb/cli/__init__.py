"""Terminal front end for browsing YouTube through tubeweb."""

from tubeweb.cli.main import CLIApplication, create_app, main

__all__ = ["CLIApplication", "create_app", "main"]
