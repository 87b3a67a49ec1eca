"""
Lumo CLI

Command-line interface for Lumo.AI.

Usage:
    lumo serve                         # Run the API server
    lumo chat --persona code-master    # Interactive REPL mode
    lumo ask "Explain recursion"       # Single message mode
    lumo analyze report.pdf            # Extract and show an uploaded file
    lumo personas                      # List personas
    lumo themes                        # List themes
    lumo history list                  # List saved conversations
    lumo history export <id> -f md     # Export a conversation
"""

import os

os.environ.setdefault("GRPC_VERBOSITY", "ERROR")
os.environ.setdefault("GLOG_minloglevel", "3")

import asyncio
import logging
import mimetypes
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from lumo import __version__, themes
from lumo.chat import ChatService, ChatServiceError
from lumo.config import get_settings
from lumo.conversations import Conversation, ConversationStore
from lumo.files import (
    FileProcessingError,
    FileService,
    ImageAnalyzer,
    format_file_for_chat,
)
from lumo.llm import LLMProviderFactory
from lumo.models.chat import Message
from lumo.personas import get_persona, list_personas
from lumo.settings_store import PERSONA_KEY, apply_config_defaults, get_value, set_value

console = Console()

EXIT_PHRASES = {"exit", "quit", "q", "bye", "/exit", "/quit"}


def configure_cli_logging() -> None:
    logging.disable(logging.CRITICAL)
    logging.basicConfig(level=logging.CRITICAL)
    for logger_name in ("lumo", "httpx", "openai", "anthropic", "asyncio", "google", "grpc"):
        logging.getLogger(logger_name).setLevel(logging.CRITICAL)


def _create_chat_service() -> ChatService:
    apply_config_defaults()
    settings = get_settings()
    try:
        provider = LLMProviderFactory.create_default_provider(settings.llm)
    except ValueError as e:
        console.print(f"[red]LLM provider is not configured: {e}[/red]")
        console.print(
            "[yellow]Set LLM_DEFAULT_PROVIDER and the matching API key in .env[/yellow]"
        )
        sys.exit(1)
    return ChatService(
        provider,
        history_limit=settings.llm.history_limit,
        max_file_chars=settings.upload.file_context_max_chars,
    )


def _create_file_service() -> FileService:
    apply_config_defaults()
    settings = get_settings()
    try:
        analyzer = ImageAnalyzer(LLMProviderFactory.create_vision_provider(settings.llm))
    except ValueError:
        analyzer = None
    return FileService(analyzer=analyzer, max_file_size=settings.upload.max_file_size)


def _resolve_persona(persona_id: str | None) -> str:
    return persona_id or get_value(PERSONA_KEY) or "general"


def format_reply(reply: str, persona_id: str) -> None:
    persona = get_persona(persona_id)
    console.print(
        Panel(
            Markdown(reply),
            title=f"[bold green]{persona.icon} {persona.name}[/bold green]",
        )
    )


def _print_conversation(conversation: Conversation) -> None:
    console.print(
        Panel.fit(
            f"[bold]{conversation.title}[/bold]\n"
            f"Created: {conversation.created_at}\n"
            f"Tags: {', '.join(conversation.tags) or '-'}",
            border_style="cyan",
        )
    )
    for msg in conversation.messages:
        if msg.role == "user":
            console.print(f"[bold cyan]You:[/bold cyan] {msg.content}")
        else:
            console.print(Panel(Markdown(msg.content), title="[bold green]Lumo.AI[/bold green]"))


@click.group()
@click.version_option(version=__version__, prog_name="Lumo.AI")
def cli():
    """Lumo.AI - AI chat assistant with file analysis and saved conversations."""
    configure_cli_logging()


@cli.command()
@click.option("--host", default=None, help="Bind address (default: API_HOST).")
@click.option("--port", default=None, type=int, help="Port (default: API_PORT).")
@click.option("--reload", is_flag=True, help="Reload on code changes.")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    console.print(f"[green]Starting Lumo.AI on http://{host}:{port}[/green]")
    uvicorn.run("lumo.api.main:app", host=host, port=port, reload=reload)


@cli.command()
@click.option("--persona", "persona_id", default=None, help="Persona id (see 'lumo personas').")
@click.option("--save", is_flag=True, help="Save the transcript as a conversation on exit.")
def chat(persona_id: str | None, save: bool):
    """Interactive REPL mode for conversations."""
    persona_id = _resolve_persona(persona_id)
    persona = get_persona(persona_id)
    console.print(
        Panel.fit(
            f"[bold green]Lumo.AI Interactive Mode[/bold green] {persona.icon} {persona.name}\n"
            "Type 'exit' or 'quit' to leave.",
            border_style="green",
        )
    )

    service = _create_chat_service()
    messages: list[Message] = []

    async def run_chat():
        try:
            while True:
                try:
                    text = console.input("[bold cyan]You:[/bold cyan] ")
                    if not text.strip():
                        continue
                    if text.strip().lower() in EXIT_PHRASES:
                        console.print("\n[yellow]Goodbye![/yellow]")
                        break

                    with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
                        reply = await service.reply(
                            text, history=messages, persona_id=persona.id
                        )
                    format_reply(reply.response, persona.id)
                    messages.append(Message(role="user", content=text))
                    messages.append(Message(role="assistant", content=reply.response))

                except KeyboardInterrupt:
                    console.print("\n[yellow]Interrupted. Type 'exit' to quit.[/yellow]")
                    continue
                except EOFError:
                    break
                except ChatServiceError as e:
                    console.print(f"\n[red]{e.message}[/red]")
                    console.print(f"[dim]{e.detail}[/dim]")
                    continue
        finally:
            await service.provider.aclose()

    asyncio.run(run_chat())

    if save and messages:
        conversation = ConversationStore().save_conversation(messages)
        console.print(f"[green]✓ Saved conversation {conversation.id}[/green]")


@cli.command()
@click.argument("message")
@click.option("--persona", "persona_id", default=None, help="Persona id (see 'lumo personas').")
def ask(message: str, persona_id: str | None):
    """Single message mode."""
    persona_id = _resolve_persona(persona_id)
    service = _create_chat_service()

    async def run_query():
        try:
            with console.status("[cyan]Thinking...[/cyan]", spinner="dots"):
                return await service.reply(message, persona_id=persona_id)
        finally:
            await service.provider.aclose()

    try:
        reply = asyncio.run(run_query())
    except ChatServiceError as e:
        console.print(f"[red]{e.message}[/red]")
        console.print(f"[dim]{e.detail}[/dim]")
        sys.exit(1)
    format_reply(reply.response, persona_id)


@cli.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--prompt", "show_prompt", is_flag=True, help="Show the chat message instead.")
def analyze(file_path: Path, show_prompt: bool):
    """Extract text (or describe an image) the way uploads are processed."""
    service = _create_file_service()
    content_type, _ = mimetypes.guess_type(file_path.name)

    async def run_analysis():
        try:
            return await service.process_file(file_path.name, content_type, file_path.read_bytes())
        finally:
            if service.analyzer is not None:
                await service.analyzer.provider.aclose()

    try:
        with console.status("[cyan]Processing file...[/cyan]", spinner="dots"):
            result = asyncio.run(run_analysis())
    except FileProcessingError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    body = format_file_for_chat(result) if show_prompt else result.content
    console.print(
        Panel(
            body,
            title=f"[bold green]{result.file_name}[/bold green]",
            subtitle=f"{result.kind.value} · {result.size_kb} KB",
        )
    )


@cli.command()
@click.option("--set", "persona_id", default=None, help="Save this persona as the default.")
def personas(persona_id: str | None):
    """List the available personas, or save the default one."""
    available = list_personas()
    if persona_id:
        if persona_id not in {persona.id for persona in available}:
            console.print(f"[red]Unknown persona: {persona_id}[/red]")
            sys.exit(1)
        set_value(PERSONA_KEY, persona_id)
        console.print(f"[green]✓ Default persona set to {persona_id}[/green]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Description")
    for persona in available:
        table.add_row(persona.id, f"{persona.icon} {persona.name}", persona.description)
    console.print(table)


@cli.command(name="themes")
@click.option("--set", "theme_id", default=None, help="Save this theme as the default.")
def list_themes(theme_id: str | None):
    """List the built-in themes, or save the default one."""
    if theme_id:
        try:
            theme = themes.save_theme(theme_id)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            sys.exit(1)
        console.print(f"[green]✓ Theme set to {theme.name}[/green]")
        return

    current = themes.saved_theme_id()
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Mode")
    table.add_column("Description")
    for theme in themes.list_themes():
        marker = " [green]✓[/green]" if theme.id == current else ""
        table.add_row(
            theme.id + marker,
            theme.name,
            "dark" if theme.is_dark else "light",
            theme.description,
        )
    console.print(table)


# ============================================================================
# Conversation history
# ============================================================================


@cli.group()
def history():
    """Manage saved conversations."""
    pass


def _print_summaries(summaries) -> None:
    if not summaries:
        console.print("[yellow]No conversations found[/yellow]")
        return
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Messages", justify="right")
    table.add_column("Tags")
    table.add_column("Updated")
    for summary in summaries:
        table.add_row(
            summary.id,
            summary.title,
            str(summary.message_count),
            ", ".join(summary.tags),
            summary.updated_at,
        )
    console.print(table)


@history.command(name="list")
def history_list():
    """List saved conversations, most recent first."""
    _print_summaries(ConversationStore().list_summaries())


@history.command(name="search")
@click.argument("query")
def history_search(query: str):
    """Search titles, messages and tags."""
    _print_summaries(ConversationStore().search(query))


@history.command(name="show")
@click.argument("conversation_id")
def history_show(conversation_id: str):
    """Print one conversation."""
    conversation = ConversationStore().get_conversation(conversation_id)
    if conversation is None:
        console.print(f"[red]Conversation not found: {conversation_id}[/red]")
        sys.exit(1)
    _print_conversation(conversation)


@history.command(name="export")
@click.argument("conversation_id")
@click.option(
    "--format",
    "-f",
    "export_format",
    type=click.Choice(["json", "txt", "md"]),
    default="txt",
    show_default=True,
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to this file instead of stdout.",
)
def history_export(conversation_id: str, export_format: str, output: Path | None):
    """Export a conversation as JSON, text or Markdown."""
    store = ConversationStore()
    if store.get_conversation(conversation_id) is None:
        console.print(f"[red]Conversation not found: {conversation_id}[/red]")
        sys.exit(1)
    body = store.export_conversation(conversation_id, export_format)
    if output is None:
        click.echo(body)
        return
    output.write_text(body, encoding="utf-8")
    console.print(f"[green]✓ Exported to {output}[/green]")


@history.command(name="delete")
@click.argument("conversation_id")
@click.option("--yes", is_flag=True, help="Skip confirmation.")
def history_delete(conversation_id: str, yes: bool):
    """Delete a saved conversation."""
    if not yes and not click.confirm(f"Delete conversation {conversation_id}?"):
        return
    if ConversationStore().delete_conversation(conversation_id):
        console.print("[green]✓ Conversation deleted[/green]")
    else:
        console.print(f"[red]Conversation not found: {conversation_id}[/red]")
        sys.exit(1)


def main():
    cli()


if __name__ == "__main__":
    main()
