"""
Web search collaborator backed by the Brave Search API.
"""

import httpx
from pydantic import BaseModel

from ..exceptions import WebSearchError
from ..utils.logging import get_logger

logger = get_logger(__name__)

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"


class SearchResult(BaseModel):
    title: str
    url: str
    description: str = ""


class WebSearchClient:
    """Query the Brave web search endpoint and normalise the results."""

    def __init__(
        self,
        api_key: str,
        base_url: str = BRAVE_SEARCH_URL,
        count: int = 5,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.count = count
        self.timeout = timeout
        self._transport = transport

    async def search(self, query: str) -> list[SearchResult]:
        """
        Run a web search.

        Args:
            query: Free-text search query

        Returns:
            At most ``count`` results

        Raises:
            WebSearchError: On non-2xx responses or transport failures
        """
        headers = {
            "Accept": "application/json",
            "X-Subscription-Token": self.api_key,
        }
        params = {"q": query, "count": str(self.count)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, headers=headers, params=params)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise WebSearchError(
                f"Web search failed with status {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise WebSearchError(f"Web search request failed: {e}", details={"query": query}) from e

        payload = response.json()
        results = [
            SearchResult(
                title=item.get("title", ""),
                url=item.get("url", ""),
                description=item.get("description", ""),
            )
            for item in payload.get("web", {}).get("results", [])
        ][: self.count]

        logger.info("web_search_results", query=query, count=len(results))
        return results


def format_results_for_prompt(results: list[SearchResult]) -> str:
    """Render results as a numbered list the model can cite from."""
    if not results:
        return "No web results were found."

    lines = []
    for i, result in enumerate(results, start=1):
        lines.append(f"[{i}] {result.title}\n{result.url}\n{result.description}".rstrip())
    return "\n\n".join(lines)
