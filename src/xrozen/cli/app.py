"""Main CLI application using Typer."""
import asyncio
from collections.abc import AsyncIterator, Coroutine
from contextlib import asynccontextmanager
from typing import Any

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.table import Table

from ..assistant import UnavailableAssistantFunction
from ..backend.models import Message, Role
from ..errors import AuthExpiredError, XrozenError
from ..log import configure_logging
from ..session import (
    DEFAULT_CONVERSATION_TITLE,
    Committed,
    ConversationSessionManager,
    Notification,
    Notifier,
    Rejected,
)
from .providers import build_services

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="xrozen",
    help="Chat with the XrozenAI assistant and manage your conversations",
    no_args_is_help=True,
    add_completion=True,
)

# Console for rich output
console = Console()

SIGN_IN_HINT = "Set XROZEN_ACCESS_TOKEN (rest backend) or XROZEN_USER_ID and try again."


class ConsoleNotifier(Notifier):
    """Prints notifications as one colored line."""

    _styles = {"information": "green", "warning": "yellow", "error": "red"}

    def __init__(self, console: Console):
        self.console = console

    def notify(self, notification: Notification) -> None:
        style = self._styles.get(notification.severity, "white")
        self.console.print(
            f"[{style}]{escape(notification.title)}:[/{style}] {escape(notification.description)}"
        )


@asynccontextmanager
async def _session() -> AsyncIterator[ConversationSessionManager]:
    """Connected session manager built from the environment."""
    async with build_services(console) as services:
        yield ConversationSessionManager(
            services.identity,
            services.store,
            services.assistant,
            ConsoleNotifier(console),
        )


def _run(coro: Coroutine[Any, Any, Any]) -> Any:
    """Run a command coroutine, turning xrozen errors into exit code 1."""
    try:
        return asyncio.run(coro)
    except AuthExpiredError as e:
        console.print(f"[red]Error: {e}.[/red] {SIGN_IN_HINT}")
        raise typer.Exit(code=1)
    except XrozenError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


async def _open_conversation(manager: ConversationSessionManager, conversation_id: str) -> None:
    """Select one of the signed-in user's conversations or exit with code 1."""
    await manager.list_conversations()
    if not any(c.id == conversation_id for c in manager.state.conversations):
        console.print(f"[red]Error: Conversation not found: {escape(conversation_id)}[/red]")
        raise typer.Exit(code=1)
    if await manager.select_conversation(conversation_id) is None:
        raise typer.Exit(code=1)


def _print_message(message: Message) -> None:
    timestamp = message.created_at.astimezone().strftime("%Y-%m-%d %H:%M")
    if message.role == Role.USER:
        console.print(f"[bold yellow]You[/bold yellow] [dim]{timestamp}[/dim]")
        console.print(message.content, markup=False, highlight=False)
    else:
        console.print(f"[bold cyan]XrozenAI[/bold cyan] [dim]{timestamp}[/dim]")
        console.print(Markdown(message.content))
    console.print()


def _print_reply(outcome: Committed) -> None:
    console.print("[bold cyan]XrozenAI:[/bold cyan]")
    console.print(Markdown(outcome.assistant_message.content))
    if outcome.action_payload is not None:
        console.print(f"[dim]Action: {escape(outcome.action_payload)}[/dim]")


@app.callback()
def configure(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        envvar="LOG_LEVEL",
        help="Logging level: debug, info, warning or error (default: warning)"
    ),
):
    """Chat with the XrozenAI assistant and manage your conversations."""
    configure_logging(log_level)


@app.command()
def conversations():
    """List your conversations, most recently updated first."""
    async def _conversations():
        async with _session() as manager:
            return await manager.list_conversations()

    items = _run(_conversations())
    if not items:
        console.print("[dim]No conversations yet. Start one with: xrozen send \"...\"[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Title")
    table.add_column("Updated", justify="right")
    for conversation in items:
        table.add_row(
            conversation.id,
            escape(conversation.title),
            conversation.updated_at.astimezone().strftime("%Y-%m-%d %H:%M"),
        )
    console.print(table)


@app.command()
def show(
    conversation_id: str = typer.Argument(..., help="Conversation ID"),
):
    """Print the messages of a conversation, oldest first."""
    async def _show():
        async with _session() as manager:
            await _open_conversation(manager, conversation_id)
            return manager.state

    state = _run(_show())
    console.print(f"[bold]{escape(state.selected_conversation.title)}[/bold]\n")
    if not state.messages:
        console.print("[dim]No messages yet.[/dim]")
    for message in state.messages:
        _print_message(message)


@app.command()
def new(
    title: str = typer.Option(
        DEFAULT_CONVERSATION_TITLE,
        "--title",
        "-t",
        help="Conversation title"
    ),
):
    """Create an empty conversation."""
    async def _new():
        async with _session() as manager:
            return await manager.create_conversation(title)

    conversation = _run(_new())
    if conversation is None:
        raise typer.Exit(code=1)
    console.print(f"[green]Created conversation[/green] {conversation.id}")


@app.command()
def delete(
    conversation_id: str = typer.Argument(..., help="Conversation ID"),
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    ),
):
    """Delete a conversation and all of its messages."""
    if not yes:
        confirm = typer.confirm(f"Delete conversation {conversation_id} and all of its messages?")
        if not confirm:
            console.print("[dim]Aborted.[/dim]")
            return

    async def _delete():
        async with _session() as manager:
            return await manager.delete_conversation(conversation_id)

    if not _run(_delete()):
        raise typer.Exit(code=1)


@app.command()
def send(
    text: str = typer.Argument(..., help="Message to send"),
    conversation_id: str | None = typer.Option(
        None,
        "--conversation",
        "-c",
        help="Conversation to continue (default: start a new one)"
    ),
):
    """Send one message and print the assistant's reply."""
    async def _send():
        async with _session() as manager:
            if conversation_id is not None:
                await _open_conversation(manager, conversation_id)
            return await manager.send_message(text)

    outcome = _run(_send())
    if isinstance(outcome, Rejected):
        console.print("[red]Error: Message is empty[/red]")
        raise typer.Exit(code=1)
    if not isinstance(outcome, Committed):
        raise typer.Exit(code=1)

    _print_reply(outcome)
    console.print(f"\n[dim]Conversation: {outcome.user_message.conversation_id}[/dim]")


@app.command()
def chat(
    conversation_id: str | None = typer.Option(
        None,
        "--conversation",
        "-c",
        help="Conversation to continue (default: the most recent one)"
    ),
    new_conversation: bool = typer.Option(
        False,
        "--new",
        "-n",
        help="Start a new conversation"
    ),
):
    """Interactive chat with XrozenAI."""
    async def _chat():
        async with _session() as manager:
            if conversation_id is not None:
                await _open_conversation(manager, conversation_id)
            elif not new_conversation:
                await manager.load()

            console.print("[bold cyan]XrozenAI Chat[/bold cyan]")
            console.print("[dim]Type '/new' for a new conversation; 'exit', 'quit' or 'q' to leave[/dim]\n")

            selected = manager.state.selected_conversation
            if selected is not None:
                console.print(f"[bold]{escape(selected.title)}[/bold]\n")
                for message in manager.state.messages:
                    _print_message(message)

            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if not user_input.strip():
                    continue

                if user_input.strip().lower() in ("exit", "quit", "q"):
                    console.print("[dim]Goodbye![/dim]")
                    break

                if user_input.strip() == "/new":
                    if await manager.create_conversation() is not None:
                        console.print("[dim]Started a new conversation.[/dim]\n")
                    continue

                with console.status("[dim]XrozenAI is thinking...[/dim]"):
                    outcome = await manager.send_message(user_input)

                if isinstance(outcome, Committed):
                    _print_reply(outcome)
                    console.print()

    _run(_chat())


@app.command(name="tui")
def tui_command(
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch interactive TUI chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        async with build_services(console) as services:
            return await run_textual_tui(
                identity=services.identity,
                store=services.store,
                assistant=services.assistant,
                log_level=log_level,
            )

    try:
        return_code = _run(_tui())
    except KeyboardInterrupt:
        return_code = 0
    if return_code:
        raise typer.Exit(code=return_code)


@app.command()
def health():
    """Check store connection, sign-in and assistant configuration."""
    async def _health():
        all_healthy = True
        services = build_services(console)

        try:
            try:
                await services.store.connect()
                console.print(f"[green]+[/green] Store ({services.store.backend_type}): OK")
            except XrozenError as e:
                console.print(f"[red]x[/red] Store ({services.store.backend_type}): FAILED ({escape(str(e))})")
                all_healthy = False

            try:
                user = await services.identity.get_current_user()
            except XrozenError as e:
                console.print(f"[red]x[/red] Identity: FAILED ({escape(str(e))})")
                all_healthy = False
            else:
                if user is None:
                    console.print("[red]x[/red] Identity: NOT SIGNED IN")
                    all_healthy = False
                else:
                    console.print(f"[green]+[/green] Identity: {escape(user.id)}")

            if isinstance(services.assistant, UnavailableAssistantFunction):
                console.print(f"[yellow]![/yellow] Assistant: {escape(services.assistant.reason)}")
            else:
                console.print(f"[green]+[/green] Assistant: {type(services.assistant).__name__}")
        finally:
            await services.aclose()

        return all_healthy

    if not _run(_health()):
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
