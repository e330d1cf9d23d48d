"""
Chat stores.

The chat core only calls ``save_chat`` and ``get_chat``; where chats end up
is up to the host. Two stores ship with the package: an in-memory one for
tests and embedding, and a JSON-file store used by the CLI.
"""

import json
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import ValidationError

from ..models.messages import Chat
from ..utils.logging import get_logger


@runtime_checkable
class ChatStore(Protocol):
    async def save_chat(self, chat: Chat) -> bool: ...

    async def get_chat(self, chat_id: str, user_id: str | None = None) -> Chat | None: ...


class InMemoryChatStore:
    """Dict-backed store."""

    def __init__(self):
        self.chats: dict[str, Chat] = {}
        self.logger = get_logger(__name__)

    async def save_chat(self, chat: Chat) -> bool:
        self.chats[chat.id] = chat
        self.logger.debug("chat_saved", chat_id=chat.id, message_count=len(chat.messages))
        return True

    async def get_chat(self, chat_id: str, user_id: str | None = None) -> Chat | None:
        chat = self.chats.get(chat_id)
        if chat is None or (user_id is not None and chat.user_id != user_id):
            return None
        return chat

    async def list_chats(self, user_id: str | None = None) -> list[Chat]:
        chats = [c for c in self.chats.values() if user_id is None or c.user_id == user_id]
        return sorted(chats, key=lambda c: c.created_at, reverse=True)


class FileChatStore:
    """
    One JSON file per chat under ``storage_dir``.

    Writes go through a temp file and an atomic rename so a crash never
    leaves a half-written chat behind.
    """

    def __init__(self, storage_dir: str | Path = "./data/chats"):
        """
        Initialize the store.

        Args:
            storage_dir: Directory to store chat files
        """
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.logger = get_logger(__name__)

    async def save_chat(self, chat: Chat) -> bool:
        """
        Save a chat to disk.

        Returns:
            True if saved successfully
        """
        try:
            chat_file = self._get_chat_file(chat.id)

            temp_file = chat_file.with_suffix(".tmp")
            with open(temp_file, "w", encoding="utf-8") as f:
                json.dump(chat.model_dump(mode="json"), f, indent=2, default=str)

            temp_file.replace(chat_file)

            self.logger.info(
                "chat_saved",
                chat_id=chat.id,
                user_id=chat.user_id,
                message_count=len(chat.messages),
            )
            return True

        except (OSError, TypeError, ValueError) as e:
            self.logger.error("failed_to_save_chat", chat_id=chat.id, error=str(e))
            return False

    async def get_chat(self, chat_id: str, user_id: str | None = None) -> Chat | None:
        """
        Load a chat from disk.

        Args:
            chat_id: Chat to load
            user_id: When given, chats owned by someone else are not returned

        Returns:
            Chat if found, None otherwise
        """
        chat_file = self._get_chat_file(chat_id)
        if not chat_file.exists():
            self.logger.info("chat_not_found", chat_id=chat_id)
            return None

        try:
            with open(chat_file, encoding="utf-8") as f:
                chat = Chat.model_validate(json.load(f))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            self.logger.error("failed_to_load_chat", chat_id=chat_id, error=str(e))
            return None

        if user_id is not None and chat.user_id != user_id:
            self.logger.warning("chat_owner_mismatch", chat_id=chat_id)
            return None
        return chat

    async def list_chats(self, user_id: str | None = None) -> list[Chat]:
        """Saved chats, newest first."""
        chats = []
        for chat_file in self.storage_dir.glob("*.json"):
            chat = await self.get_chat(chat_file.stem, user_id)
            if chat is not None:
                chats.append(chat)
        return sorted(chats, key=lambda c: c.created_at, reverse=True)

    def _get_chat_file(self, chat_id: str) -> Path:
        # Sanitize chat_id to prevent directory traversal
        safe_id = "".join(c for c in chat_id if c.isalnum() or c in "-_")
        return self.storage_dir / f"{safe_id}.json"
