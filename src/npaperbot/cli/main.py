"""CLI application using Typer for npaperbot."""

import asyncio
from typing import Optional

import typer
import uvicorn
from rich.console import Console
from rich.table import Table

from ..bot.client import TelegramClient
from ..bot.handlers import MessageHandler
from ..bot.polling import run_polling
from ..bot.webhook import create_app, webhook_path
from ..catalog.fetcher import CatalogFetcher
from ..catalog.store import CatalogStore
from ..config.settings import settings
from ..core.exceptions import DecodeError, FetchError, InvalidPattern, ParseAmbiguous
from ..parsing.implicit import parse_references
from ..refresh.scheduler import RefreshScheduler
from ..resolution.resolver import RequestResolver
from ..utils.logging import get_logger

app = typer.Typer(
    name="npaperbot",
    help="Telegram bot answering questions about WG21 papers",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)


@app.command()
def run(
    webhook: Optional[bool] = typer.Option(
        None,
        "--webhook/--polling",
        help="Receive updates by webhook instead of long polling (default: WEBHOOK_MODE).",
    ),
) -> None:
    """Start the bot together with the catalog refresh scheduler."""
    if not settings.teloxide_token:
        console.print("[red]Error: TELOXIDE_TOKEN env variable missing[/red]")
        raise typer.Exit(1)
    use_webhook = settings.webhook_mode if webhook is None else webhook
    if use_webhook and not settings.host:
        console.print("[red]Error: HOST env variable missing[/red]")
        raise typer.Exit(1)
    try:
        asyncio.run(_run_bot(use_webhook))
    except KeyboardInterrupt:
        console.print("[yellow]Interrupted[/yellow]")


async def _run_bot(use_webhook: bool) -> None:
    logger.info("Starting npaperbot", extra={"bot_name": settings.bot_name, "webhook": use_webhook})
    store = CatalogStore()
    fetcher = CatalogFetcher()
    scheduler = RefreshScheduler(store, fetcher, settings.refresh_period)
    client = TelegramClient()
    handler = MessageHandler(
        RequestResolver(store, settings.max_results_per_request),
        client=client,
        bot_name=settings.bot_name,
    )

    refresh_task = asyncio.create_task(scheduler.run_forever())
    try:
        if use_webhook:
            logger.info("Webhook mode activated")
            path = webhook_path(client.token)
            await client.set_webhook(f"https://{settings.host}{path}")
            web_app = create_app(handler, client.token, store=store, scheduler=scheduler)
            server = uvicorn.Server(
                uvicorn.Config(web_app, host=settings.bind_address, port=settings.bind_port)
            )
            await server.serve()
        else:
            await run_polling(client, handler, poll_timeout=settings.poll_timeout)
    finally:
        scheduler.stop()
        refresh_task.cancel()
        try:
            await refresh_task
        except asyncio.CancelledError:
            pass
        await client.close()
        await fetcher.close()


@app.command()
def search(
    pattern: str = typer.Argument(..., help="Regular expression matched against number, title and author"),
    limit: int = typer.Option(
        settings.max_results_per_request, "--limit", "-n", min=1, help="Maximum number of papers"
    ),
    source: str = typer.Option(settings.papers_database_uri, "--source", help="Catalog URI"),
) -> None:
    """Fetch the catalog once and run an explicit search against it."""
    try:
        store = asyncio.run(_load_store(source))
    except (FetchError, DecodeError) as e:
        console.print(f"[red]Cannot load catalog: {e}[/red]")
        raise typer.Exit(1)

    try:
        result = RequestResolver(store, limit).resolve_explicit(pattern)
    except InvalidPattern:
        console.print("[red]Invalid pattern, try a different query[/red]")
        raise typer.Exit(2)

    if result.is_empty:
        console.print("[yellow]Nothing found[/yellow]")
        return

    table = Table(title=f"Papers matching {pattern!r}")
    table.add_column("Number", style="cyan")
    table.add_column("Title")
    table.add_column("Author", style="green")
    table.add_column("Date")
    for document in result.sorted_documents(key=lambda d: d.identifier):
        table.add_row(document.identifier, document.title or "", document.authors or "", document.date or "")
    console.print(table)
    if result.truncated:
        console.print(f"[yellow]Only the first {limit} results are shown[/yellow]")


async def _load_store(source: str) -> CatalogStore:
    async with CatalogFetcher(source_address=source) as fetcher:
        catalog = await fetcher.fetch()
    console.print(f"[green]Loaded {len(catalog)} papers[/green]")
    return CatalogStore(catalog)


@app.command()
def parse(text: str = typer.Argument(..., help="Message text to scan for [P1234R5]-style mentions")) -> None:
    """Show the paper mentions found in a message."""
    try:
        references, remainder = parse_references(text)
    except ParseAmbiguous as e:
        console.print(f"[red]Malformed mention at offset {e.offset}[/red]")
        raise typer.Exit(1)
    if not references:
        console.print("[yellow]No mentions found[/yellow]")
        return
    table = Table()
    table.add_column("Kind", style="cyan")
    table.add_column("Number")
    table.add_column("Revision")
    table.add_column("Pattern", style="green")
    for reference in references:
        revision = "" if reference.revision is None else str(reference.revision)
        table.add_row(reference.kind, reference.number, revision, reference.pattern)
    console.print(table)
    if remainder:
        console.print(f"Unscanned remainder: {remainder!r}")


if __name__ == "__main__":
    app()
