"""
Command-line interface for paperchat.

Provides an interactive chat in the terminal plus commands to inspect the
configuration and saved chats.
"""

import asyncio
import base64
import mimetypes
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.live import Live
from rich.markup import escape

from . import __version__
from .core.app import ChatApp, ChatSession
from .core.config import ChatConfig, get_config
from .core.persistence import FileChatStore
from .core.session import StaticSessionProvider
from .exceptions import ChatError
from .llm.catalog import ModelCatalog
from .models.messages import UIMessage
from .models.ui import CategoryMultiSelect, DateSelect, ErrorMessage, UINode
from .ui.console import find_picker, render_display, render_node
from .ui.selection import calculate_past_date, category_selection_query, date_selection_query
from .utils.logging import setup_logging
from .utils.rich_logging import console as chat_console

app = typer.Typer(
    name="paperchat",
    help="Chat with an LLM that can search arXiv and the web",
    add_completion=False,
)

console = chat_console.console


def _load_config() -> ChatConfig:
    try:
        return get_config()
    except ValidationError as e:
        chat_console.print_error(f"Invalid configuration: {escape(str(e))}")
        sys.exit(1)


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]paperchat[/bold cyan] version {__version__}")
    console.print("arXiv research assistant")


@app.command()
def config():
    """
    Display current configuration settings.

    API keys are masked.
    """
    cfg = _load_config()

    from rich.table import Table

    table = Table(title="Active Settings")
    table.add_column("Setting", style="cyan", no_wrap=True)
    table.add_column("Value", style="yellow")

    for key, value in sorted(cfg.export_safe().items()):
        if value is None:
            continue
        table.add_row(key, str(value))

    console.print(table)


@app.command()
def models():
    """List the selectable models."""
    cfg = _load_config()
    chat_console.print_models(ModelCatalog(), selected=cfg.default_model)


def _image_data_url(path: Path) -> str:
    mime = mimetypes.guess_type(path.name)[0] or "image/png"
    return f"data:{mime};base64,{base64.b64encode(path.read_bytes()).decode('ascii')}"


def _answer_picker(picker: CategoryMultiSelect | DateSelect) -> str | None:
    """Ask the user to answer a picker; returns the follow-up message."""
    if isinstance(picker, CategoryMultiSelect):
        raw = console.input("[info]Subcategories (numbers, comma separated; empty to skip):[/info] ")
        picks = [p.strip() for p in raw.split(",") if p.strip().isdigit()]
        selected = [picker.categories[int(p) - 1] for p in picks if 0 < int(p) <= len(picker.categories)]
        return category_selection_query(selected) if selected else None

    raw = console.input("[info]Date range (number; empty to skip):[/info] ").strip()
    if not raw.isdigit() or not 0 < int(raw) <= len(picker.ranges):
        return None
    return date_selection_query(calculate_past_date(picker.ranges[int(raw) - 1]))


async def _follow(message: UIMessage, live: Live) -> UINode | None:
    """Mirror a turn's display on the terminal until it settles."""
    stream = message.display
    consumer = asyncio.ensure_future(stream.final())
    while not consumer.done():
        live.update(render_node(stream.current))
        await asyncio.sleep(0.1)
    final = consumer.result()
    live.update(render_node(final))
    return final


async def _run_turn(session: ChatSession, text: str, model: str, images: list[str]) -> UINode | None:
    try:
        message = await session.send(text, model=model, images=images)
    except ChatError as e:
        chat_console.print_error(e.user_message)
        return None

    with Live(console=console, refresh_per_second=10, transient=False) as live:
        try:
            final = await _follow(message, live)
        except ChatError as e:
            live.update(render_node(ErrorMessage(message=e.user_message)))
            final = None
    await session.wait()
    return final


async def _chat_loop(chat_app: ChatApp, session: ChatSession, model: str) -> None:
    images: list[str] = []
    pending: str | None = None

    for entry in session.ui_state:
        console.print(render_display(entry.display))

    while True:
        if pending is not None:
            text, pending = pending, None
            console.print(f"[dim]{escape(text)}[/dim]")
        else:
            text = console.input("[user]You>[/user] ").strip()

        if text in ("/exit", "/quit"):
            break
        if text == "/models":
            chat_console.print_models(chat_app.catalog, selected=model)
            continue
        if text.startswith("/model "):
            alias = text.split(maxsplit=1)[1]
            if alias in chat_app.catalog.models:
                model = alias
                chat_console.print_success(f"Using {alias}")
            else:
                chat_console.print_error(f"Unknown model '{alias}'")
            continue
        if text.startswith("/image "):
            path = Path(text.split(maxsplit=1)[1]).expanduser()
            if not path.is_file():
                chat_console.print_error(f"No such file: {path}")
                continue
            images.append(_image_data_url(path))
            chat_console.print_info(f"Attached {path.name}")
            continue
        if not text and not images:
            continue

        final = await _run_turn(session, text, model, images)
        images = []

        picker = find_picker(final)
        if picker is not None:
            pending = _answer_picker(picker)

    chat_console.print_info(f"Chat saved as {session.chat_id}")


@app.command()
def chat(
    model: Optional[str] = typer.Option(None, "--model", "-m", help="Model alias for this chat"),
    resume: Optional[str] = typer.Option(None, "--resume", "-r", help="Continue a saved chat"),
    user: str = typer.Option("local", "--user", help="User id chats are saved under"),
):
    """
    Start an interactive chat.

    Commands inside the chat: /models, /model <alias>, /image <path>, /exit
    """
    cfg = _load_config()
    cfg.ensure_directories()
    setup_logging(cfg)

    chat_app = ChatApp(
        config=cfg,
        store=FileChatStore(cfg.store_dir),
        session_provider=StaticSessionProvider(user),
    )
    model = model or cfg.default_model
    if model not in chat_app.catalog.models:
        chat_console.print_error(f"Unknown model '{model}'")
        sys.exit(1)

    if cfg.enable_rich_console:
        chat_console.print_banner()
        chat_console.print_config_summary(cfg, chat_app.catalog)

    async def main() -> None:
        session = chat_app.new_session()
        if resume:
            loaded = await chat_app.load_session(resume)
            if loaded is None:
                chat_console.print_error(f"Chat '{resume}' not found")
                sys.exit(1)
            session = loaded
        await _chat_loop(chat_app, session, model)

    try:
        asyncio.run(main())
    except (KeyboardInterrupt, EOFError):
        console.print()


@app.command()
def history(
    chat_id: Optional[str] = typer.Argument(None, help="Chat to show; lists chats when omitted"),
    user: str = typer.Option("local", "--user", help="User id chats are saved under"),
):
    """Show saved chats, or replay one."""
    cfg = _load_config()
    chat_app = ChatApp(
        config=cfg,
        store=FileChatStore(cfg.store_dir),
        session_provider=StaticSessionProvider(user),
    )

    if chat_id is None:
        chats = asyncio.run(chat_app.store.list_chats(user))
        if not chats:
            chat_console.print_info("No saved chats")
            return

        from rich.table import Table

        table = Table(title="Saved chats")
        table.add_column("Id", style="cyan", no_wrap=True)
        table.add_column("Title")
        table.add_column("Created", style="dim")
        table.add_column("Messages", justify="right")
        for saved in chats:
            table.add_row(saved.id, saved.title, saved.created_at.strftime("%Y-%m-%d %H:%M"), str(len(saved.messages)))
        console.print(table)
        return

    session = asyncio.run(chat_app.load_session(chat_id))
    if session is None:
        chat_console.print_error(f"Chat '{chat_id}' not found")
        sys.exit(1)

    for entry in session.ui_state:
        if entry.display is not None:
            console.print(render_display(entry.display))
