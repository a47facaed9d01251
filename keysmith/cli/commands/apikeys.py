"""
CLI commands for API key management.
"""

from typing import Optional
from uuid import UUID

import typer
from rich.console import Console
from rich.table import Table

from ...apikeys import ApiKeyManager
from ...client import Keysmith
from ...errors import KeysmithError, ValidationError
from . import parse_scopes, run_async

console = Console()
app = typer.Typer(help="Manage repository API keys")


def _print_error(error: KeysmithError) -> None:
    if isinstance(error, ValidationError):
        for field, message in error.field_errors.items():
            console.print(f"[red]Error:[/red] {field}: {message}")
    else:
        console.print(f"[red]Error:[/red] {error.message}")


@app.command("create")
def apikeys_create_command(
    owner: str = typer.Option(..., "--owner", "-u", help="Username of the key owner"),
    repository_id: str = typer.Option(..., "--repository", "-r", help="Repository ID"),
    scopes: str = typer.Option(..., "--scopes", "-s", help="Comma-separated scopes"),
) -> None:
    """Issue a new API key for a repository."""
    scope_set = parse_scopes(scopes)

    async def _create():
        keysmith = await Keysmith.create()
        try:
            user = await keysmith.users.get_by_username(owner)
            if not user:
                console.print(f"[red]Error:[/red] User {owner} not found")
                raise typer.Exit(1)

            repository = await keysmith.repositories.get(UUID(repository_id))
            if not repository:
                console.print(f"[red]Error:[/red] Repository {repository_id} not found")
                raise typer.Exit(1)

            key = await keysmith.api_keys.create(user, scope_set, repository)

            console.print(f"[green]✓[/green] API key created for {repository.name}")
            console.print()
            console.print(f"[bold cyan]API Key:[/bold cyan] {key.key}")
            console.print()
            console.print(f"  ID: {key.id}")
            console.print(f"  Scopes: {', '.join(sorted(s.value for s in key.scopes))}")
        except KeysmithError as e:
            _print_error(e)
            raise typer.Exit(1)
        finally:
            await keysmith.close()

    run_async(_create())


@app.command("list")
def apikeys_list_command(
    owner: Optional[str] = typer.Option(None, "--owner", "-u", help="List keys of this user"),
    repository_id: Optional[str] = typer.Option(
        None, "--repository", "-r", help="List all keys of this repository"
    ),
) -> None:
    """List API keys by owner or by repository."""
    if bool(owner) == bool(repository_id):
        console.print("[red]Error:[/red] Pass exactly one of --owner or --repository")
        raise typer.Exit(1)

    async def _list():
        keysmith = await Keysmith.create()
        try:
            if owner:
                user = await keysmith.users.get_by_username(owner)
                if not user:
                    console.print(f"[red]Error:[/red] User {owner} not found")
                    raise typer.Exit(1)
                keys = await keysmith.api_keys.list_for_caller(user)
            else:
                keys = await keysmith.api_keys.list_by_repository(UUID(repository_id))

            if not keys:
                console.print("[yellow]No API keys found[/yellow]")
                return

            table = Table(title="API Keys")
            table.add_column("ID", style="dim")
            table.add_column("Prefix", style="yellow")
            table.add_column("Scopes", style="blue")
            table.add_column("Repository", style="cyan")
            table.add_column("Created", style="dim")

            for key in keys:
                table.add_row(
                    str(key.id)[:8],
                    key.key[:8],
                    ", ".join(sorted(s.value for s in key.scopes)),
                    str(key.repository_id)[:8],
                    key.created_at.strftime("%Y-%m-%d"),
                )

            console.print(table)
        finally:
            await keysmith.close()

    run_async(_list())


@app.command("edit")
def apikeys_edit_command(
    key_id: str = typer.Argument(..., help="API key ID"),
    scopes: str = typer.Option(..., "--scopes", "-s", help="New comma-separated scopes"),
    as_user: str = typer.Option(..., "--as", help="Username performing the edit"),
) -> None:
    """Replace the scopes of an API key."""
    scope_set = parse_scopes(scopes)

    async def _edit():
        keysmith = await Keysmith.create()
        try:
            caller = await keysmith.users.get_by_username(as_user)
            if not caller:
                console.print(f"[red]Error:[/red] User {as_user} not found")
                raise typer.Exit(1)

            key = await keysmith.api_keys.edit(caller, UUID(key_id), scope_set)
            console.print(f"[green]✓[/green] API key {key_id[:8]}... updated")
            console.print(f"  Scopes: {', '.join(sorted(s.value for s in key.scopes))}")
        except KeysmithError as e:
            _print_error(e)
            raise typer.Exit(1)
        finally:
            await keysmith.close()

    run_async(_edit())


@app.command("delete")
def apikeys_delete_command(
    key_id: str = typer.Argument(..., help="API key ID to delete"),
    as_user: str = typer.Option(..., "--as", help="Username performing the deletion"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Permanently delete an API key."""
    if not force:
        confirm = typer.confirm(f"Permanently delete API key {key_id[:8]}...?")
        if not confirm:
            raise typer.Abort()

    async def _delete():
        keysmith = await Keysmith.create()
        try:
            caller = await keysmith.users.get_by_username(as_user)
            if not caller:
                console.print(f"[red]Error:[/red] User {as_user} not found")
                raise typer.Exit(1)

            await keysmith.api_keys.delete(caller, UUID(key_id))
            console.print(f"[green]✓[/green] API key {key_id[:8]}... deleted")
        except KeysmithError as e:
            _print_error(e)
            raise typer.Exit(1)
        finally:
            await keysmith.close()

    run_async(_delete())


@app.command("scopes")
def apikeys_scopes_command() -> None:
    """Show which scopes each repository permission can grant."""
    table = Table(title="Grantable Scopes")
    table.add_column("Permission", style="cyan")
    table.add_column("Scopes", style="blue")

    for permission, scopes in ApiKeyManager.available_scopes().items():
        table.add_row(permission, ", ".join(scopes))

    console.print(table)
