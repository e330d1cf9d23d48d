"""Identifier helpers."""

import uuid


def new_id() -> str:
    """Return a fresh random identifier for messages, chats and tool calls."""
    return uuid.uuid4().hex
