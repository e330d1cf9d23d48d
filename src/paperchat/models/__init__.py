"""
Pydantic models for the chat transcript.
"""

from .enums import LogLevel, MessageRole
from .messages import (
    AIState,
    Chat,
    Message,
    ToolCallPart,
    ToolResultPart,
    UIMessage,
    UIState,
    to_llm_messages,
)

__all__ = [
    "AIState",
    "Chat",
    "Message",
    "ToolCallPart",
    "ToolResultPart",
    "UIMessage",
    "UIState",
    "to_llm_messages",
    "MessageRole",
    "LogLevel",
]
