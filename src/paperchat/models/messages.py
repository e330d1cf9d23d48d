"""
Transcript schemas for the chat core.

The AI state is the append-only list of messages exchanged with the model.
Tool invocations are stored as a pair of messages: an assistant message with
a tool-call part and a tool message with the matching tool-result part.
"""

import json
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field
from pydantic_core import to_jsonable_python

from ..utils.ids import new_id
from .enums import MessageRole


class ToolCallPart(BaseModel):
    """An assistant request to run a named tool."""

    type: Literal["tool-call"] = "tool-call"
    tool_name: str
    tool_call_id: str
    args: dict[str, Any] = Field(default_factory=dict)


class ToolResultPart(BaseModel):
    """The outcome of a tool call, keyed by the same tool_call_id."""

    type: Literal["tool-result"] = "tool-result"
    tool_name: str
    tool_call_id: str
    result: Any = None


ContentPart = Annotated[Union[ToolCallPart, ToolResultPart], Field(discriminator="type")]


class Message(BaseModel):
    """A single transcript entry."""

    id: str = Field(default_factory=new_id)
    role: MessageRole
    content: str | list[ContentPart]
    name: str | None = None
    images: list[str] = Field(
        default_factory=list,
        description="Data URLs attached to a user turn",
    )

    @property
    def is_text(self) -> bool:
        return isinstance(self.content, str)


class AIState(BaseModel):
    """Server-side conversation state for one chat."""

    chat_id: str = Field(default_factory=new_id)
    messages: list[Message] = Field(default_factory=list)


class Chat(BaseModel):
    """A persisted chat record."""

    id: str
    title: str
    user_id: str
    created_at: datetime
    messages: list[Message] = Field(default_factory=list)
    path: str

    def to_ai_state(self) -> AIState:
        return AIState(chat_id=self.id, messages=list(self.messages))


@dataclass
class UIMessage:
    """A renderable entry of the UI state.

    ``display`` is a UI node, a list of nodes, a live ``UIStream`` or None.
    """

    id: str
    display: Any = None


UIState = list[UIMessage]


def tool_call_message(tool_name: str, tool_call_id: str, args: dict[str, Any]) -> Message:
    return Message(
        role=MessageRole.ASSISTANT,
        content=[ToolCallPart(tool_name=tool_name, tool_call_id=tool_call_id, args=args)],
    )


def tool_result_message(tool_name: str, tool_call_id: str, result: Any) -> Message:
    return Message(
        role=MessageRole.TOOL,
        content=[
            ToolResultPart(
                tool_name=tool_name,
                tool_call_id=tool_call_id,
                result=to_jsonable_python(result),
            )
        ],
    )


def to_llm_messages(messages: list[Message]) -> list[dict[str, Any]]:
    """
    Convert transcript messages into the provider chat format.

    Args:
        messages: Transcript messages in order

    Returns:
        List of OpenAI-style message dicts accepted by litellm
    """
    converted: list[dict[str, Any]] = []

    for message in messages:
        if isinstance(message.content, str):
            entry: dict[str, Any] = {"role": message.role.value, "content": message.content}
            if message.role == MessageRole.USER and message.images:
                entry["content"] = [{"type": "text", "text": message.content}] + [
                    {"type": "image_url", "image_url": {"url": image}} for image in message.images
                ]
            if message.name:
                entry["name"] = message.name
            converted.append(entry)
            continue

        calls = [part for part in message.content if isinstance(part, ToolCallPart)]
        if calls:
            converted.append(
                {
                    "role": MessageRole.ASSISTANT.value,
                    "content": None,
                    "tool_calls": [
                        {
                            "id": part.tool_call_id,
                            "type": "function",
                            "function": {
                                "name": part.tool_name,
                                "arguments": json.dumps(part.args),
                            },
                        }
                        for part in calls
                    ],
                }
            )

        for part in message.content:
            if isinstance(part, ToolResultPart):
                converted.append(
                    {
                        "role": MessageRole.TOOL.value,
                        "tool_call_id": part.tool_call_id,
                        "name": part.tool_name,
                        "content": json.dumps(part.result, default=str),
                    }
                )

    return converted
