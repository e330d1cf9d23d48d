"""
Pytest configuration and shared fixtures.
"""

import pytest
from paperchat.core.config import ChatConfig, reset_config
from paperchat.core.persistence import InMemoryChatStore
from paperchat.core.session import StaticSessionProvider
from paperchat.core.state import MutableAIState
from paperchat.integrations.arxiv import Paper, PaperLink
from paperchat.integrations.web_search import SearchResult
from paperchat.models.messages import AIState
from paperchat.tools import build_default_registry


class FakeLLM:
    """Replays one scripted event list per stream_chat call."""

    def __init__(self, *scripts):
        self.scripts = list(scripts)
        self.calls = []

    async def stream_chat(self, messages, tools=None, model=None, temperature=None, **kwargs):
        self.calls.append({"messages": messages, "tools": tools, "model": model})
        script = self.scripts.pop(0) if self.scripts else []
        for event in script:
            if isinstance(event, Exception):
                raise event
            yield event


class StubArxiv:
    def __init__(self, papers=None):
        self.papers = papers or []
        self.queries = []

    async def search(self, query):
        self.queries.append(query)
        return self.papers


class StubSearch:
    def __init__(self, results=None):
        self.results = results or []
        self.queries = []

    async def search(self, query):
        self.queries.append(query)
        return self.results


@pytest.fixture(autouse=True)
def clean_config():
    """Reset the global configuration around every test"""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config(tmp_path):
    """Configuration with no tool delay and a temporary store"""
    return ChatConfig(tool_ui_delay_seconds=0, store_dir=tmp_path / "chats", _env_file=None)


@pytest.fixture
def make_llm():
    return FakeLLM


@pytest.fixture
def sample_papers():
    return [
        Paper(
            id="http://arxiv.org/abs/2401.00001v1",
            updated="2024-01-02T00:00:00Z",
            published="2024-01-01T00:00:00Z",
            title="Graph Neural Networks Revisited",
            summary="We revisit GNNs.",
            authors=["Ada Lovelace", "Alan Turing"],
            links=[
                PaperLink(href="https://arxiv.org/abs/2401.00001v1", rel="alternate"),
                PaperLink(href="https://arxiv.org/pdf/2401.00001v1", rel="related", title="pdf"),
            ],
            category="cs.LG",
        )
    ]


@pytest.fixture
def arxiv_stub(sample_papers):
    return StubArxiv(sample_papers)


@pytest.fixture
def search_stub():
    return StubSearch(
        [
            SearchResult(title="Result one", url="https://example.com/1", description="First"),
            SearchResult(title="Result two", url="https://example.com/2", description="Second"),
        ]
    )


@pytest.fixture
def registry(config, arxiv_stub, search_stub):
    """Default registry with stubbed collaborators, web search included"""
    return build_default_registry(config, arxiv_client=arxiv_stub, search_client=search_stub)


@pytest.fixture
def store():
    return InMemoryChatStore()


@pytest.fixture
def signed_in():
    return StaticSessionProvider("user-1", name="Test User")


@pytest.fixture
def state():
    return MutableAIState(AIState(chat_id="chat-1"))
