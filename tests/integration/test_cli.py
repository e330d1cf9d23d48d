"""
Tests for the typer command-line interface.
"""

import asyncio
from datetime import datetime

import pytest
from typer.testing import CliRunner

from paperchat import __version__
from paperchat.cli import app
from paperchat.core.persistence import FileChatStore
from paperchat.models.enums import MessageRole
from paperchat.models.messages import Chat, Message, tool_call_message, tool_result_message

runner = CliRunner()


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("PAPERCHAT_STORE_DIR", str(tmp_path / "chats"))
    monkeypatch.setenv("PAPERCHAT_OPENAI_API_KEY", "sk-very-secret")
    return tmp_path


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_config_masks_secrets(env):
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "sk-very-secret" not in result.output
    assert "default_model" in result.output


def test_invalid_config(env, monkeypatch):
    monkeypatch.setenv("PAPERCHAT_DEFAULT_MODEL", "gpt-17")
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 1


def test_models(env):
    result = runner.invoke(app, ["models"])
    assert result.exit_code == 0
    assert "llama3-70b-8192" in result.output


def test_history_empty(env):
    result = runner.invoke(app, ["history"])
    assert result.exit_code == 0
    assert "No saved chats" in result.output


def test_history_replays_chat(env):
    chat = Chat(
        id="abc123",
        title="Physics please",
        user_id="local",
        created_at=datetime(2024, 1, 1),
        messages=[
            Message(role=MessageRole.USER, content="Physics please"),
            tool_call_message("show_category_selection", "call-1", {"categories": ["Optics"], "title": "Physics"}),
            tool_result_message("show_category_selection", "call-1", {"categories": ["Optics"], "title": "Physics"}),
            Message(role=MessageRole.ASSISTANT, content="Pick a subcategory."),
        ],
        path="/chat/abc123",
    )
    asyncio.run(FileChatStore(env / "chats").save_chat(chat))

    listing = runner.invoke(app, ["history"])
    assert listing.exit_code == 0
    assert "abc123" in listing.output

    replay = runner.invoke(app, ["history", "abc123"])
    assert replay.exit_code == 0
    assert "Physics please" in replay.output
    assert "Optics" in replay.output
    assert "Pick a subcategory." in replay.output


def test_history_other_user(env):
    chat = Chat(
        id="private",
        title="secret",
        user_id="someone-else",
        created_at=datetime(2024, 1, 1),
        messages=[],
        path="/chat/private",
    )
    asyncio.run(FileChatStore(env / "chats").save_chat(chat))

    result = runner.invoke(app, ["history", "private"])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_chat_unknown_model(env):
    result = runner.invoke(app, ["chat", "--model", "gpt-17"])
    assert result.exit_code == 1


@pytest.mark.asyncio
async def test_failed_turn_shows_error_message(config, make_llm, registry, store, signed_in, mocker):
    from io import StringIO

    from rich.console import Console

    from paperchat import cli
    from paperchat.core.app import ChatApp
    from paperchat.exceptions import LLMError
    from paperchat.models.ui import ErrorMessage

    mocker.patch.object(cli, "console", Console(file=StringIO(), width=100))
    spy = mocker.spy(cli, "render_node")

    chat_app = ChatApp(
        config=config,
        llm=make_llm([LLMError("rate limited", status_code=429)]),
        registry=registry,
        store=store,
        session_provider=signed_in,
    )
    session = chat_app.new_session()

    final = await cli._run_turn(session, "hello", "gpt-3.5-turbo", [])

    assert final is None
    errors = [c.args[0] for c in spy.call_args_list if isinstance(c.args[0], ErrorMessage)]
    assert errors == [ErrorMessage(message="You have reached your message limit! Please try again later.")]
    assert [m.role for m in session.ai_state.messages] == [MessageRole.USER]
