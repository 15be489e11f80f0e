"""
Products API - Data Maintenance CLI
===================================

What:  Command-line entry point that drops and recreates every table.
Usage:
    products-api-data --clear
    python -m products_api.data --clear

Exit codes:
    0  Tables recreated (or nothing requested)
    1  The reset failed (details logged)

Uses DATABASE_URL from the environment / .env, like the server.
"""

import asyncio
import logging

import typer
from rich.console import Console

from products_api.config import settings
from products_api.database import Database

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(add_completion=False, help="Products API data maintenance.")


async def clear_database(database: Database) -> None:
    """Drop and recreate all tables, always disposing the engine afterwards."""
    try:
        await database.reset()
    finally:
        await database.dispose()


@app.command()
def main(
    clear: bool = typer.Option(
        False,
        "--clear",
        help="Drop every table and recreate it empty.",
    ),
) -> None:
    """Database maintenance for the products table."""
    if not clear:
        console.print("Nothing to do. Pass [bold]--clear[/bold] to drop and recreate all tables.")
        raise typer.Exit(code=0)

    database = Database(settings.database_url)
    try:
        asyncio.run(clear_database(database))
    except Exception as e:
        logger.error("Failed to clear the database: %s", e, exc_info=True)
        console.print(f"[bold red]Could not drop the tables:[/bold red] {e}")
        raise typer.Exit(code=1)

    console.print("[bold green]Tables dropped and recreated successfully[/bold green]")
    raise typer.Exit(code=0)


if __name__ == "__main__":
    app()
