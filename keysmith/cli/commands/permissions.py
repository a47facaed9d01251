"""
CLI commands for repository permissions.
"""

from uuid import UUID

import typer
from rich.console import Console

from ...client import Keysmith
from ...permissions.models import PermissionType
from . import run_async

console = Console()
app = typer.Typer(help="Manage repository permissions")


@app.command("grant")
def permissions_grant_command(
    username: str = typer.Argument(..., help="Username receiving the permission"),
    repository_id: str = typer.Option(..., "--repository", "-r", help="Repository ID"),
    permission: PermissionType = typer.Option(
        PermissionType.MANAGE, "--type", "-t", help="Permission level"
    ),
) -> None:
    """Grant a user a permission on a repository."""

    async def _grant():
        keysmith = await Keysmith.create()
        try:
            user = await keysmith.users.get_by_username(username)
            if not user:
                console.print(f"[red]Error:[/red] User {username} not found")
                raise typer.Exit(1)

            repository = await keysmith.repositories.get(UUID(repository_id))
            if not repository:
                console.print(f"[red]Error:[/red] Repository {repository_id} not found")
                raise typer.Exit(1)

            await keysmith.permissions.grant(user.id, repository.id, permission)
            console.print(
                f"[green]✓[/green] Granted {permission.value} on {repository.name} to {username}"
            )
        finally:
            await keysmith.close()

    run_async(_grant())


@app.command("revoke")
def permissions_revoke_command(
    username: str = typer.Argument(..., help="Username losing the permission"),
    repository_id: str = typer.Option(..., "--repository", "-r", help="Repository ID"),
) -> None:
    """Remove a user's permission on a repository."""

    async def _revoke():
        keysmith = await Keysmith.create()
        try:
            user = await keysmith.users.get_by_username(username)
            if not user:
                console.print(f"[red]Error:[/red] User {username} not found")
                raise typer.Exit(1)

            await keysmith.permissions.revoke(user.id, UUID(repository_id))
            console.print(f"[green]✓[/green] Revoked access for {username}")
        finally:
            await keysmith.close()

    run_async(_revoke())
