"""
Tests for the chat stores.
"""

from datetime import datetime

import pytest

from paperchat.core.persistence import ChatStore, FileChatStore, InMemoryChatStore
from paperchat.models.enums import MessageRole
from paperchat.models.messages import Chat, Message, ToolResultPart, tool_call_message, tool_result_message


def make_chat(chat_id="chat-1", user_id="user-1", created_at=datetime(2024, 1, 1)):
    return Chat(
        id=chat_id,
        title="papers on gnn",
        user_id=user_id,
        created_at=created_at,
        messages=[
            Message(role=MessageRole.USER, content="papers on gnn"),
            tool_call_message("show_research_papers", "call-1", {"query": "gnn"}),
            tool_result_message("show_research_papers", "call-1", [{"title": "A paper"}]),
        ],
        path=f"/chat/{chat_id}",
    )


def test_stores_satisfy_protocol(tmp_path):
    assert isinstance(InMemoryChatStore(), ChatStore)
    assert isinstance(FileChatStore(tmp_path), ChatStore)


class TestInMemoryChatStore:
    @pytest.mark.asyncio
    async def test_roundtrip(self, store):
        chat = make_chat()
        assert await store.save_chat(chat) is True
        assert await store.get_chat("chat-1") == chat

    @pytest.mark.asyncio
    async def test_owner_check(self, store):
        await store.save_chat(make_chat())
        assert await store.get_chat("chat-1", "user-1") is not None
        assert await store.get_chat("chat-1", "someone-else") is None

    @pytest.mark.asyncio
    async def test_list_newest_first(self, store):
        await store.save_chat(make_chat("old", created_at=datetime(2024, 1, 1)))
        await store.save_chat(make_chat("new", created_at=datetime(2024, 6, 1)))
        await store.save_chat(make_chat("theirs", user_id="user-2"))
        assert [c.id for c in await store.list_chats("user-1")] == ["new", "old"]


class TestFileChatStore:
    @pytest.mark.asyncio
    async def test_roundtrip_keeps_tool_parts(self, tmp_path):
        store = FileChatStore(tmp_path / "chats")
        await store.save_chat(make_chat())

        loaded = await store.get_chat("chat-1")

        assert loaded == make_chat().model_copy(update={"messages": loaded.messages})
        assert isinstance(loaded.messages[2].content[0], ToolResultPart)
        assert loaded.messages[2].content[0].result == [{"title": "A paper"}]
        assert not list((tmp_path / "chats").glob("*.tmp"))

    @pytest.mark.asyncio
    async def test_overwrite(self, tmp_path):
        store = FileChatStore(tmp_path)
        chat = make_chat()
        await store.save_chat(chat)
        chat.messages.append(Message(role=MessageRole.ASSISTANT, content="Here you go"))
        await store.save_chat(chat)

        loaded = await store.get_chat("chat-1")
        assert len(loaded.messages) == 4

    @pytest.mark.asyncio
    async def test_missing_and_foreign(self, tmp_path):
        store = FileChatStore(tmp_path)
        assert await store.get_chat("nope") is None
        await store.save_chat(make_chat())
        assert await store.get_chat("chat-1", "user-2") is None

    @pytest.mark.asyncio
    async def test_corrupt_file(self, tmp_path):
        store = FileChatStore(tmp_path)
        (tmp_path / "broken.json").write_text("{not json")
        assert await store.get_chat("broken") is None

    @pytest.mark.asyncio
    async def test_ids_are_sanitised(self, tmp_path):
        store = FileChatStore(tmp_path / "chats")
        await store.save_chat(make_chat("../escape"))
        assert (tmp_path / "chats" / "escape.json").exists()
        assert not (tmp_path / "escape.json").exists()

    @pytest.mark.asyncio
    async def test_list_chats(self, tmp_path):
        store = FileChatStore(tmp_path)
        await store.save_chat(make_chat("old", created_at=datetime(2024, 1, 1)))
        await store.save_chat(make_chat("new", created_at=datetime(2024, 6, 1)))
        assert [c.id for c in await store.list_chats("user-1")] == ["new", "old"]
