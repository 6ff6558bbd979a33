"""Database maintenance commands."""

import typer
from rich.console import Console

from src.catalog.core.exceptions import StoreUnavailable
from src.catalog.core.services import DbSessionService

console = Console()

db_app = typer.Typer(help="Manage the product database")


@db_app.command("init")
def init_db() -> None:
    """Create the users and products tables if they do not exist."""
    database_service = DbSessionService()
    try:
        database_service.connect()
        database_service.create_all()
    except StoreUnavailable as e:
        console.print(f"[red]❌ {e.message}: {e.details.get('error')}[/red]")
        raise typer.Exit(code=1) from e
    finally:
        database_service.dispose()

    console.print("[green]✅ Database tables created[/green]")
