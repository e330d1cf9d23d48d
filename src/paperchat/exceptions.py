"""Exception classes with structured context for the chat core"""

from typing import Any
from datetime import datetime


class ChatError(Exception):
    """Base exception with context and metadata"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        retry_after: float | None = None,
        recoverable: bool = False,
        user_message: str | None = None,
    ):
        """
        Initialize exception with context.

        Args:
            message: Technical error message for logs
            details: Additional context (dict for structured logging)
            retry_after: Seconds to wait before retrying (if applicable)
            recoverable: Whether error is recoverable with retry
            user_message: User-friendly error message
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.retry_after = retry_after
        self.recoverable = recoverable
        self.user_message = user_message or message
        self.timestamp = datetime.now()

    def __str__(self) -> str:
        parts = [self.message]

        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"({details_str})")

        if self.retry_after:
            parts.append(f"[retry after {self.retry_after}s]")

        if self.recoverable:
            parts.append("[recoverable]")

        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "retry_after": self.retry_after,
            "recoverable": self.recoverable,
            "user_message": self.user_message,
            "timestamp": self.timestamp.isoformat(),
        }


class LLMError(ChatError):
    """LLM API errors with retry information"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int | None = None,
        retry_after: float | None = None,
    ):
        # Rate limits (429) are usually recoverable
        recoverable = status_code == 429

        if status_code == 429:
            user_message = "You have reached your message limit! Please try again later."
        elif status_code == 401:
            user_message = "API authentication failed. Please check your API key."
        elif status_code == 503:
            user_message = "Service temporarily unavailable. Please try again."
        else:
            user_message = "An error occurred while calling the LLM API."

        super().__init__(
            message=message,
            details=details or {},
            retry_after=retry_after,
            recoverable=recoverable,
            user_message=user_message,
        )
        self.status_code = status_code


class ToolExecutionError(ChatError):
    """Tool lookup, argument validation and execution errors"""

    def __init__(
        self,
        message: str,
        tool_name: str,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        details["tool_name"] = tool_name

        super().__init__(
            message=message,
            details=details,
            recoverable=False,
            user_message=f"Tool '{tool_name}' failed.",
        )
        self.tool_name = tool_name


class ArxivError(ChatError):
    """arXiv API request or feed parsing errors"""

    def __init__(self, message: str, status_code: int | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(
            message=message,
            details=details,
            recoverable=status_code is not None and status_code >= 500,
            user_message="Could not fetch papers from arXiv.",
        )
        self.status_code = status_code


class WebSearchError(ChatError):
    """Web search API errors"""

    def __init__(self, message: str, status_code: int | None = None, details: dict[str, Any] | None = None):
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code

        super().__init__(
            message=message,
            details=details,
            recoverable=status_code == 429,
            user_message="Web search is unavailable right now.",
        )
        self.status_code = status_code


class AIStateError(ChatError):
    """Raised on transcript mutations that break the append-only contract"""

    def __init__(self, message: str, chat_id: str | None = None):
        details = {"chat_id": chat_id} if chat_id else {}
        super().__init__(message=message, details=details)
        self.chat_id = chat_id


class StreamClosedError(ChatError):
    """Raised when a streamable is updated after it was closed"""

    pass


class ChatInputError(ChatError):
    """Invalid user turn (empty message, unsupported attachments)"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message=message, details=details, user_message=message)


class ConfigurationError(ChatError):
    """Configuration validation errors"""

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value

        super().__init__(
            message=message,
            details=details,
            recoverable=False,  # Config errors require fix
            user_message=f"Configuration error: {message}",
        )
        self.field = field
        self.value = value
