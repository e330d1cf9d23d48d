"""
Unit tests for transcript models and provider message conversion.
"""

import json
from datetime import datetime

from paperchat.models.enums import MessageRole
from paperchat.models.messages import (
    AIState,
    Chat,
    Message,
    ToolCallPart,
    ToolResultPart,
    to_llm_messages,
    tool_call_message,
    tool_result_message,
)


class TestMessage:
    def test_ids_are_generated(self):
        a = Message(role=MessageRole.USER, content="hi")
        b = Message(role=MessageRole.USER, content="hi")
        assert a.id and a.id != b.id

    def test_parts_are_discriminated(self):
        message = Message.model_validate(
            {
                "role": "tool",
                "content": [
                    {"type": "tool-result", "tool_name": "t", "tool_call_id": "1", "result": {"x": 1}},
                ],
            }
        )
        assert isinstance(message.content[0], ToolResultPart)
        assert message.is_text is False

    def test_tool_message_pair(self):
        call = tool_call_message("show_research_papers", "call-1", {"query": "gnn"})
        result = tool_result_message("show_research_papers", "call-1", [{"title": "x"}])

        assert call.role == MessageRole.ASSISTANT
        assert isinstance(call.content[0], ToolCallPart)
        assert result.role == MessageRole.TOOL
        assert result.content[0].tool_call_id == call.content[0].tool_call_id


def test_chat_to_ai_state():
    chat = Chat(
        id="c1",
        title="hi",
        user_id="u1",
        created_at=datetime(2024, 1, 1),
        messages=[Message(role=MessageRole.USER, content="hi")],
        path="/chat/c1",
    )
    state = chat.to_ai_state()
    assert isinstance(state, AIState)
    assert state.chat_id == "c1"
    assert len(state.messages) == 1


class TestToLLMMessages:
    def test_text_messages(self):
        converted = to_llm_messages(
            [
                Message(role=MessageRole.USER, content="hi"),
                Message(role=MessageRole.ASSISTANT, content="hello", name="bot"),
            ]
        )
        assert converted == [
            {"role": "user", "content": "hi"},
            {"role": "assistant", "content": "hello", "name": "bot"},
        ]

    def test_user_images_become_parts(self):
        converted = to_llm_messages(
            [Message(role=MessageRole.USER, content="what is this?", images=["data:image/png;base64,AAA"])]
        )
        assert converted[0]["content"] == [
            {"type": "text", "text": "what is this?"},
            {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAA"}},
        ]

    def test_tool_call_and_result(self):
        converted = to_llm_messages(
            [
                tool_call_message("show_category_selection", "call-1", {"title": "Physics"}),
                tool_result_message("show_category_selection", "call-1", {"categories": ["Optics"]}),
            ]
        )

        assistant, tool = converted
        assert assistant["role"] == "assistant"
        assert assistant["content"] is None
        assert assistant["tool_calls"][0]["id"] == "call-1"
        assert assistant["tool_calls"][0]["function"]["name"] == "show_category_selection"
        assert json.loads(assistant["tool_calls"][0]["function"]["arguments"]) == {"title": "Physics"}

        assert tool == {
            "role": "tool",
            "tool_call_id": "call-1",
            "name": "show_category_selection",
            "content": json.dumps({"categories": ["Optics"]}),
        }
