"""
LLM module - streaming chat completions via LiteLLM and the model catalog.
"""

from .catalog import DEFAULT_MODELS, ModelCatalog, ModelConfig
from .client import LLMClient, LLMEvent, StreamFinished, TextDelta, ToolCallRequest

__all__ = [
    "LLMClient",
    "LLMEvent",
    "TextDelta",
    "ToolCallRequest",
    "StreamFinished",
    "ModelCatalog",
    "ModelConfig",
    "DEFAULT_MODELS",
]
