"""
Core components of the paperchat chat runtime.
"""

from .config import ChatConfig, get_config, reset_config
from .state import MutableAIState
from .streaming import StreamableText, StreamableUI, UIStream, run_async_fn_without_blocking

__all__ = [
    "ChatConfig",
    "get_config",
    "reset_config",
    "MutableAIState",
    "StreamableText",
    "StreamableUI",
    "UIStream",
    "run_async_fn_without_blocking",
]
