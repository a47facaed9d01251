"""
Keysmith CLI - Command-line interface for repository API keys.

Usage:
    keysmith api-keys       Issue, list, edit and delete API keys
    keysmith permissions    Grant and revoke repository permissions
"""

import typer

from ..config import LoggingConfig
from ..utils.logging import configure_logging
from .commands import apikeys, permissions

# Create the main Typer app
app = typer.Typer(
    name="keysmith",
    help="Repository-scoped API keys with Supabase integration",
    add_completion=False,
)

app.add_typer(apikeys.app, name="api-keys")
app.add_typer(permissions.app, name="permissions")


@app.callback()
def callback() -> None:
    """
    Keysmith - repository-scoped API keys.

    Connection settings are read from KEYSMITH_* environment variables.
    """
    configure_logging(LoggingConfig())


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
