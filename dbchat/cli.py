"""
DBChat CLI

Command-line interface for asking questions of a database in plain language.

Usage:
    dbchat connections add shop "Server=db;Database=Shop;User Id=app;Password=..."
    dbchat connections list                    # List stored connection names
    dbchat connections remove shop             # Delete a stored connection
    dbchat connections keygen                  # Print a new encryption key
    dbchat schema shop                         # Show the schema sent to the model
    dbchat ask shop "top 5 orders by total"    # Generate SQL, run it, show results
    dbchat run shop "SELECT TOP 5 * FROM dbo.Orders"
    dbchat chat                                # Free-form follow-up chat
"""

import asyncio
import logging
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from dbchat.config import ConnectionStoreSettings, clear_settings_cache, get_settings
from dbchat.connections.store import (
    ConnectionStore,
    create_connection_store,
    generate_encryption_key,
)
from dbchat.connectors.base import ConnectorError
from dbchat.llm.models import LLMMessage
from dbchat.models.database import AIConnection
from dbchat.models.errors import DBChatError, GenerationParseError
from dbchat.pipeline.orchestrator import DBChatPipeline

console = Console()

EXIT_WORDS = {"exit", "quit", "bye", ":q"}
QUIET_LOGGERS = ("dbchat", "httpx", "openai", "asyncio")


def configure_cli_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, force=True)
    for logger_name in QUIET_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.NOTSET if verbose else logging.CRITICAL)


def _verbose_requested() -> bool:
    ctx = click.get_current_context(silent=True)
    return bool(ctx is not None and ctx.find_root().params.get("verbose"))


def create_store() -> ConnectionStore:
    return create_connection_store(ConnectionStoreSettings())


def create_pipeline() -> DBChatPipeline:
    clear_settings_cache()
    settings = get_settings()
    if _verbose_requested():
        # Loading settings reset the root level from LOG_LEVEL.
        logging.getLogger().setLevel(logging.DEBUG)
    return DBChatPipeline.from_settings(settings)


def _fail(message: str) -> None:
    console.print(f"[red]Error: {message}[/red]")
    sys.exit(1)


def _get_connection(name: str) -> AIConnection:
    try:
        return create_store().get_connection(name)
    except (DBChatError, ValueError) as e:
        _fail(str(e))


def print_table(rows: list[list[str]]) -> None:
    """Render a result table (row 0 is the header)."""
    if not rows:
        console.print("[yellow]No rows returned.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    for column in rows[0]:
        table.add_column(column)
    for row in rows[1:]:
        table.add_row(*row)

    console.print(table)
    console.print(f"[dim]{len(rows) - 1} row(s)[/dim]")


def print_parse_failure(error: GenerationParseError) -> None:
    console.print("[red]The model response was not a valid query.[/red]")
    console.print(Panel(error.raw_response, title="Raw model response", border_style="red"))


async def _with_pipeline(action):
    pipeline = create_pipeline()
    try:
        return await action(pipeline)
    finally:
        await pipeline.close()


# ============================================================================
# Commands
# ============================================================================


@click.group()
@click.version_option(version="0.1.0", prog_name="DBChat")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose: bool):
    """DBChat - ask your database questions in plain language."""
    configure_cli_logging(verbose)


@cli.group()
def connections():
    """Manage stored connections."""


@connections.command("list")
def list_connections():
    """List stored connection names."""
    try:
        stored = create_store().list_connections()
    except ValueError as e:
        _fail(str(e))

    if not stored:
        console.print("[yellow]No connections stored.[/yellow]")
        return
    for connection in stored:
        console.print(connection.name)


@connections.command("add")
@click.argument("name")
@click.argument("connection_string")
def add_connection(name: str, connection_string: str):
    """Store (or replace) a named connection string."""
    try:
        create_store().add_connection(
            AIConnection(name=name, connection_string=connection_string)
        )
    except ValueError as e:
        _fail(str(e))
    console.print(f"[green]Connection '{name}' saved[/green]")


@connections.command("remove")
@click.argument("name")
def remove_connection(name: str):
    """Delete a stored connection."""
    try:
        create_store().delete_connection(name)
    except (DBChatError, ValueError) as e:
        _fail(str(e))
    console.print(f"[green]Connection '{name}' removed[/green]")


@connections.command("keygen")
def keygen():
    """Print a new key for CONNECTIONS_ENCRYPTION_KEY."""
    click.echo(generate_encryption_key())


@cli.command()
@click.argument("name")
def schema(name: str):
    """Show the schema lines the model sees for a connection."""
    connection = _get_connection(name)

    try:
        result = asyncio.run(_with_pipeline(lambda p: p.get_schema(connection)))
    except (ConnectorError, DBChatError, ValueError) as e:
        _fail(str(e))

    if not result.schema_raw:
        console.print("[yellow]No user tables found.[/yellow]")
        return
    for line in result.schema_raw:
        click.echo(line)


@cli.command()
@click.argument("name")
@click.argument("question")
@click.option("--no-run", is_flag=True, help="Only generate the SQL, do not execute it.")
def ask(name: str, question: str, no_run: bool):
    """Generate SQL for a question and run it."""
    connection = _get_connection(name)

    try:
        with console.status("[cyan]Generating query...[/cyan]", spinner="dots"):
            result = asyncio.run(
                _with_pipeline(lambda p: p.ask(connection, question, execute=not no_run))
            )
    except GenerationParseError as e:
        print_parse_failure(e)
        sys.exit(1)
    except (ConnectorError, DBChatError, ValueError) as e:
        _fail(str(e))

    console.print(Panel(result.query.summary, title="[bold green]Summary[/bold green]"))
    console.print(Syntax(result.query.query, "sql", word_wrap=True))
    if result.table is not None:
        print_table(result.table)


@cli.command()
@click.argument("name")
@click.argument("sql")
def run(name: str, sql: str):
    """Run SQL (for example an edited query) and show the results."""
    connection = _get_connection(name)

    try:
        rows = asyncio.run(_with_pipeline(lambda p: p.run_sql(connection, sql)))
    except (ConnectorError, DBChatError, ValueError) as e:
        _fail(str(e))

    print_table(rows)


@cli.command()
@click.option("--system", "system_prompt", default=None, help="Optional system message.")
def chat(system_prompt: str | None):
    """Free-form chat with the configured model."""
    history: list[LLMMessage] = []
    if system_prompt:
        history.append(LLMMessage(role="system", content=system_prompt))

    async def session():
        pipeline = create_pipeline()
        try:
            while True:
                prompt = await asyncio.to_thread(console.input, "[bold cyan]You:[/bold cyan] ")
                text = prompt.strip()
                if not text:
                    continue
                if text.lower() in EXIT_WORDS:
                    console.print("[yellow]Goodbye![/yellow]")
                    return
                history.append(LLMMessage(role="user", content=text))
                reply = await pipeline.chat(history)
                history.append(reply)
                console.print(f"[bold green]Assistant:[/bold green] {reply.content}")
        finally:
            await pipeline.close()

    try:
        asyncio.run(session())
    except (EOFError, KeyboardInterrupt):
        console.print("\n[yellow]Goodbye![/yellow]")
    except DBChatError as e:
        _fail(str(e))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
