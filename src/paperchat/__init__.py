"""
paperchat - Conversational arXiv research assistant
Streaming chat core with UI tools for papers, web search and stocks
"""

# Setup rich logging and tracebacks globally
from .utils.rich_logging import setup_rich_logging
setup_rich_logging()

from .core.app import ChatApp, ChatSession
from .core.config import ChatConfig
from .models.messages import AIState, Chat, Message, UIMessage

__version__ = "0.1.0"

__all__ = [
    "ChatApp",
    "ChatSession",
    "ChatConfig",
    "AIState",
    "Chat",
    "Message",
    "UIMessage",
]
