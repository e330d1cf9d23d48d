"""
UI fragments produced by the chat core.

These nodes are opaque to the core: tools and the reducer build them, the
host renders them. Every node serializes to a plain dict through
``to_dict()`` so it can ride on the host's existing RPC/streaming channel.
"""

from typing import Any
from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field

from ..integrations.arxiv import Paper


class UINode(BaseModel):
    """Base class for renderable fragments."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    component: str = "node"

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class SpinnerMessage(UINode):
    component: str = "spinner-message"


class UserMessage(UINode):
    component: str = "user-message"
    content: str
    images: list[str] = Field(default_factory=list)


class BotMessage(UINode):
    """Assistant markdown text, either final or still streaming."""

    component: str = "bot-message"
    content: Any = ""

    @property
    def text(self) -> str:
        # StreamableText exposes the accumulated value as .text
        return self.content if isinstance(self.content, str) else self.content.text

    @property
    def streaming(self) -> bool:
        return not isinstance(self.content, str) and not self.content.closed

    def to_dict(self) -> dict[str, Any]:
        return {"component": self.component, "content": self.text, "streaming": self.streaming}


class SystemMessage(UINode):
    component: str = "system-message"
    content: str


class ToolMessage(BotMessage):
    """Answer produced from web results, with the short query that was searched."""

    component: str = "tool-message"
    concised_query: str = ""

    @property
    def search_url(self) -> str:
        return f"https://www.bing.com/search?q={quote(self.concised_query)}"

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["concised_query"] = self.concised_query
        data["search_url"] = self.search_url if self.concised_query else None
        return data


class BotCard(UINode):
    """Frame around a structured tool result."""

    component: str = "bot-card"
    child: UINode
    show_avatar: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"component": self.component, "show_avatar": self.show_avatar, "child": self.child.to_dict()}


class CategoryMultiSelect(UINode):
    component: str = "category-multi-select"
    categories: list[str] = Field(default_factory=list)
    title: str = ""


class DateSelect(UINode):
    component: str = "date-select"
    ranges: list[str] = Field(default_factory=list)


class ArxivResponse(UINode):
    component: str = "arxiv-response"
    papers: list[Paper] = Field(default_factory=list)


class StockQuote(BaseModel):
    symbol: str
    price: float
    delta: float


class StockCard(UINode):
    component: str = "stock"
    quote: StockQuote


class StockList(UINode):
    component: str = "stock-list"
    quotes: list[StockQuote] = Field(default_factory=list)


class Fragment(UINode):
    """Several sibling nodes shown as one display."""

    component: str = "fragment"
    children: list[UINode] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"component": self.component, "children": [child.to_dict() for child in self.children]}


class ErrorMessage(UINode):
    component: str = "error-message"
    message: str
