"""
Tests for the web search collaborator against a mocked HTTP transport.
"""

import httpx
import pytest

from paperchat.exceptions import WebSearchError
from paperchat.integrations.web_search import SearchResult, WebSearchClient, format_results_for_prompt

PAYLOAD = {
    "web": {
        "results": [
            {"title": "Turing Award", "url": "https://awards.acm.org/turing", "description": "ACM A.M. Turing Award"},
            {"title": "News", "url": "https://example.com/news"},
        ]
    }
}


class TestWebSearchClient:
    @pytest.mark.asyncio
    async def test_search(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=PAYLOAD)

        client = WebSearchClient(api_key="brv", count=5, transport=httpx.MockTransport(handler))
        results = await client.search("turing award 2024")

        assert results == [
            SearchResult(title="Turing Award", url="https://awards.acm.org/turing", description="ACM A.M. Turing Award"),
            SearchResult(title="News", url="https://example.com/news", description=""),
        ]
        request = seen[0]
        assert request.headers["X-Subscription-Token"] == "brv"
        assert request.url.params["q"] == "turing award 2024"
        assert request.url.params["count"] == "5"

    @pytest.mark.asyncio
    async def test_results_are_capped(self):
        many = {"web": {"results": [{"title": str(i), "url": f"https://e.com/{i}"} for i in range(10)]}}
        client = WebSearchClient(
            api_key="brv", count=3, transport=httpx.MockTransport(lambda r: httpx.Response(200, json=many))
        )
        assert len(await client.search("q")) == 3

    @pytest.mark.asyncio
    async def test_missing_web_section(self):
        client = WebSearchClient(api_key="brv", transport=httpx.MockTransport(lambda r: httpx.Response(200, json={})))
        assert await client.search("q") == []

    @pytest.mark.asyncio
    async def test_http_error(self):
        client = WebSearchClient(api_key="bad", transport=httpx.MockTransport(lambda r: httpx.Response(401)))
        with pytest.raises(WebSearchError) as exc_info:
            await client.search("q")
        assert exc_info.value.status_code == 401


def test_format_results_for_prompt():
    text = format_results_for_prompt(
        [
            SearchResult(title="One", url="https://e.com/1", description="First"),
            SearchResult(title="Two", url="https://e.com/2"),
        ]
    )
    assert text == "[1] One\nhttps://e.com/1\nFirst\n\n[2] Two\nhttps://e.com/2"


def test_format_no_results():
    assert format_results_for_prompt([]) == "No web results were found."
