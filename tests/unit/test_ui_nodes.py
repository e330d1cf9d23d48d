"""
Tests for UI node serialization.
"""

from paperchat.core.streaming import StreamableText
from paperchat.models.ui import BotCard, BotMessage, CategoryMultiSelect, Fragment, SpinnerMessage, ToolMessage


def test_bot_message_to_dict():
    assert BotMessage(content="hi").to_dict() == {"component": "bot-message", "content": "hi", "streaming": False}


def test_streaming_bot_message():
    text = StreamableText()
    text.update("par")
    message = BotMessage(content=text)
    assert message.to_dict() == {"component": "bot-message", "content": "par", "streaming": True}
    text.done("tial")
    assert message.to_dict()["streaming"] is False
    assert message.text == "partial"


def test_tool_message_to_dict():
    data = ToolMessage(content="answer", concised_query="rust async").to_dict()
    assert data["component"] == "tool-message"
    assert data["search_url"] == "https://www.bing.com/search?q=rust%20async"


def test_tool_message_without_query():
    assert ToolMessage(content="answer").to_dict()["search_url"] is None


def test_nested_nodes():
    card = BotCard(child=CategoryMultiSelect(categories=["Optics"], title="Physics"))
    data = Fragment(children=[SpinnerMessage(), card]).to_dict()
    assert data["children"][0] == {"component": "spinner-message"}
    assert data["children"][1]["child"] == {
        "component": "category-multi-select",
        "categories": ["Optics"],
        "title": "Physics",
    }
