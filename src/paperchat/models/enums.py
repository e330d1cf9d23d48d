"""Enums shared by the transcript models and configuration."""

from enum import Enum


class MessageRole(str, Enum):
    """Roles a transcript message can carry.

    Attributes:
        USER: A turn typed by the user
        ASSISTANT: Model output, either text or a tool-call request
        SYSTEM: Instructions; never rendered back to the UI
        TOOL: Results of tool invocations
    """
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


class LogLevel(str, Enum):
    """Standard logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def __str__(self) -> str:
        """Return the enum value as a string for serialization."""
        return self.value


__all__ = [
    "MessageRole",
    "LogLevel",
]
