"""User management CLI commands."""

from collections.abc import Iterator
from contextlib import contextmanager

import typer
from rich.console import Console
from rich.table import Table

from src.catalog.core.exceptions import CatalogError
from src.catalog.core.services import CredentialService, DbSessionService

console = Console()

# Create the users subcommand app
users_app = typer.Typer(help="Manage catalog accounts and roles")


@contextmanager
def credential_service() -> Iterator[CredentialService]:
    """Credential service bound to a fresh session; exits the CLI on domain errors."""
    database_service = DbSessionService()
    try:
        with database_service.session_scope() as session:
            yield CredentialService(session)
    except CatalogError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        database_service.dispose()


@users_app.command("create-admin")
def create_admin(
    name: str = typer.Argument(..., help="Display name"),
    email: str = typer.Argument(..., help="Login email"),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Password (prompted when omitted)",
    ),
) -> None:
    """Create an account with the admin role."""
    with credential_service() as credentials:
        user = credentials.create_user(name, email, password, role="admin")
    console.print(f"[green]✅ Created admin '{user.email}' ({user.id})[/green]")


@users_app.command("set-role")
def set_role(
    email: str = typer.Argument(..., help="Login email of the account"),
    role: str = typer.Argument(..., help="New role: user or admin"),
) -> None:
    """Promote or demote an existing account."""
    if role not in ("user", "admin"):
        console.print(f"[red]❌ Unknown role '{role}', expected user or admin[/red]")
        raise typer.Exit(code=1)

    with credential_service() as credentials:
        user = credentials.set_role(email, role)
    console.print(f"[green]✅ '{user.email}' is now {user.role}[/green]")


@users_app.command("list")
def list_users() -> None:
    """List all accounts."""
    with credential_service() as credentials:
        users = credentials.list_users()

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Email", style="blue")
    table.add_column("Role", style="magenta")
    for user in users:
        table.add_row(user.id, user.name, user.email, user.role)

    console.print(table)
    console.print(f"\n[green]Found {len(users)} users[/green]")
