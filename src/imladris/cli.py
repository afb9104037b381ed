"""
CLI for the Imladris item collection.

Commands:
- info: Show configuration and collection status
- show: List every item
- get: Look up an item by id
- tag: List items carrying a tag
- add: Add a link or image item
- add-image: Upload an image and add it as an item
- rename: Change an item's name
- delete: Delete an item
"""

import asyncio

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from .config import settings
from .items.base import COLUMNS, NAME_INDEX, Item
from .items.codec import pad_row
from .logging import setup_logging
from .service import ImladrisService

app = typer.Typer(
    name="imladris",
    help="Manage a collection of tagged links and images stored in Google Sheets",
)
console = Console()


def get_service() -> ImladrisService:
    """Build the service from the global settings."""
    return ImladrisService.from_settings(settings)


def _run(coro_factory):
    """Run a coroutine against a fresh service and close it afterwards."""

    async def runner():
        service = get_service()
        try:
            return await coro_factory(service)
        finally:
            await service.aclose()

    return asyncio.run(runner())


def _items_table(items: list[Item], title: str) -> Table:
    table = Table(title=title)
    for column in COLUMNS:
        table.add_column(column, style="cyan" if column == "Id" else None)
    for item in items:
        table.add_row(
            item.id,
            item.link or "",
            item.kind.value if item.kind else "",
            item.name or "",
            ", ".join(item.tags) if item.tags else "",
            item.description or "",
        )
    return table


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Imladris - a spreadsheet-backed collection of links and images."""
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, json_output=settings.log_json)
    logger.debug("CLI initialized with log level: {}", log_level)


@app.command()
def info():
    """Show configuration and collection status."""
    logger.debug("Displaying configuration and status")
    console.print("[bold blue]Imladris Configuration[/]")

    table = Table(title="Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Store Type", settings.store_type)
    table.add_row("Spreadsheet Id", settings.spreadsheet_id or "[red]NOT SET[/]")
    table.add_row("Sheet", settings.sheet_name or "(first sheet)")
    table.add_row("Starting Row", str(settings.starting_row))
    table.add_row("Credentials File", settings.google_credentials_file)
    table.add_row("Cache TTL", f"{settings.cache_ttl_seconds:g}s")
    table.add_row("Imgur Client Id", "***" if settings.imgur_client_id else "[red]NOT SET[/]")

    console.print(table)

    console.print("\n[bold]Collection Status[/]")
    try:

        async def get_status(service: ImladrisService):
            await service.refresh()
            return service.cache.get_snapshot()

        snapshot = _run(get_status)
    except Exception as e:
        logger.error("Error accessing store: {}", e)
        console.print(f"[red]Error accessing store: {e}[/]")
        return

    if snapshot is None:
        console.print("[yellow]Could not load the collection[/]")
        return
    logger.debug("Collection status: {} items, {} tags", len(snapshot), len(snapshot.tag_index))
    console.print(f"Items: {len(snapshot)}")
    console.print(f"Tags: {', '.join(snapshot.tags) if snapshot.tags else 'none'}")


@app.command()
def show():
    """List every item in the collection."""

    async def load(service: ImladrisService):
        return await service.all_items(force_update=True)

    items = _run(load)
    if not items:
        console.print("[yellow]No items found[/]")
        return
    console.print(_items_table(items, f"{len(items)} items"))


@app.command()
def get(item_id: str = typer.Argument(..., help="Item id")):
    """Look up an item by id."""

    async def lookup(service: ImladrisService):
        return await service.get_item_by_id(item_id, force_update=True)

    item = _run(lookup)
    if item is None:
        console.print(f"[red]No item with id {item_id}[/]")
        raise typer.Exit(1)
    console.print(_items_table([item], "Item"))


@app.command()
def tag(name: str = typer.Argument(..., help="Tag to search for")):
    """List items carrying a tag."""

    async def lookup(service: ImladrisService):
        return await service.get_items_by_tag(name, force_update=True)

    items = _run(lookup)
    if not items:
        console.print(f"[yellow]No items tagged '{name.lower()}'[/]")
        return
    console.print(_items_table(items, f"Tagged '{name.lower()}'"))


@app.command()
def add(
    link: str = typer.Argument(..., help="Link of the item"),
    kind: str = typer.Option("link", "--kind", "-k", help="Item type: link or image"),
    name: str | None = typer.Option(None, "--name", "-n", help="Display name (defaults to link)"),
    tags: list[str] | None = typer.Option(None, "--tag", "-t", help="Tag, may be repeated"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
):
    """Add a link or image item."""
    logger.info("Adding item: link={}, kind={}", link, kind)

    async def create(service: ImladrisService):
        return await service.add_item(link, kind, name, tags or None, description)

    item = _run(create)
    if item is None:
        console.print("[red]Item was not added[/]")
        raise typer.Exit(1)
    console.print(f"[green]Added {item.kind.value} {item.id}[/]")


@app.command("add-image")
def add_image(
    payload: str = typer.Argument(..., help="Image URL or base64 data"),
    source_type: str = typer.Option("url", "--type", help="Payload type: url, base64 or file"),
    name: str | None = typer.Option(None, "--name", "-n", help="Display name"),
    tags: list[str] | None = typer.Option(None, "--tag", "-t", help="Tag, may be repeated"),
    description: str | None = typer.Option(None, "--description", "-d", help="Description"),
):
    """Upload an image to the image host and add it as an item."""
    if not settings.imgur_client_id:
        logger.error("IMGUR_CLIENT_ID not set - cannot upload images")
        console.print("[red]Error: IMGUR_CLIENT_ID not set[/]")
        raise typer.Exit(1)

    async def create(service: ImladrisService):
        return await service.add_image(source_type, payload, name, tags or None, description)

    item = _run(create)
    if item is None:
        console.print("[red]Image was not added[/]")
        raise typer.Exit(1)
    console.print(f"[green]Added image {item.id} at {item.link}[/]")


@app.command()
def rename(
    item_id: str = typer.Argument(..., help="Item id"),
    name: str = typer.Argument(..., help="New display name"),
):
    """Change the name of an item."""

    def set_name(row):
        row = pad_row(row)
        row[NAME_INDEX] = name
        return row

    async def update(service: ImladrisService):
        return await service.update_items("Id", lambda cell: cell == item_id, set_name, True)

    positions = _run(update)
    if not positions:
        console.print(f"[red]No item with id {item_id} was updated[/]")
        raise typer.Exit(1)
    console.print(f"[green]Renamed row {positions[0]}[/]")


@app.command()
def delete(item_id: str = typer.Argument(..., help="Item id")):
    """Delete an item (and any duplicate rows sharing its id)."""

    async def remove(service: ImladrisService):
        return await service.delete_items("Id", lambda cell: cell == item_id)

    positions = _run(remove)
    if not positions:
        console.print(f"[red]No item with id {item_id} was deleted[/]")
        raise typer.Exit(1)
    console.print(f"[green]Deleted rows {', '.join(str(p) for p in positions)}[/]")


if __name__ == "__main__":
    app()
