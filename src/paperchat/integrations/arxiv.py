"""
arXiv collaborator - search the public arXiv API and parse its Atom feed.
"""

import xml.etree.ElementTree as ET

import httpx
from pydantic import BaseModel, Field

from ..exceptions import ArxivError
from ..utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_ARXIV_URL = "https://export.arxiv.org/api/query"


class PaperLink(BaseModel):
    href: str | None = None
    rel: str | None = None
    title: str | None = None


class Paper(BaseModel):
    """A single arXiv entry."""

    id: str
    updated: str
    published: str
    title: str
    summary: str
    authors: list[str] = Field(default_factory=list)
    links: list[PaperLink] = Field(default_factory=list)
    category: str | None = None

    @property
    def abs_url(self) -> str | None:
        return self.links[0].href if self.links else None

    @property
    def pdf_url(self) -> str | None:
        for link in self.links:
            if link.title == "pdf":
                return link.href
        return self.links[1].href if len(self.links) > 1 else None


def _text(entry: ET.Element, tag: str) -> str:
    node = entry.find(f"{{*}}{tag}")
    if node is None or node.text is None:
        return ""
    return node.text


def _secure(href: str | None) -> str | None:
    if href and href.startswith("http://"):
        return href.replace("http://", "https://", 1)
    return href


def parse_feed(xml: str) -> list[Paper]:
    """
    Parse an arXiv Atom response into papers.

    Args:
        xml: Raw Atom XML returned by the query endpoint

    Returns:
        Papers in feed order

    Raises:
        ArxivError: If the document is not well-formed XML
    """
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as e:
        raise ArxivError(f"Malformed arXiv feed: {e}") from e

    papers = []
    for entry in root.findall("{*}entry"):
        authors = [_text(author, "name") for author in entry.findall("{*}author")]
        links = [
            PaperLink(
                href=_secure(link.get("href")),
                rel=link.get("rel"),
                title=link.get("title"),
            )
            for link in entry.findall("{*}link")
        ]
        primary = entry.find("{*}primary_category")

        papers.append(
            Paper(
                id=_text(entry, "id"),
                updated=_text(entry, "updated"),
                published=_text(entry, "published"),
                title=_text(entry, "title").strip(),
                summary=_text(entry, "summary").strip(),
                authors=authors,
                links=links,
                category=primary.get("term") if primary is not None else None,
            )
        )

    return papers


class ArxivClient:
    """
    Thin async client over the arXiv query API.

    Example:
        client = ArxivClient()
        papers = await client.search("graph neural networks 2023-05")
    """

    def __init__(
        self,
        base_url: str = DEFAULT_ARXIV_URL,
        max_results: int = 5,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self.max_results = max_results
        self.timeout = timeout
        self._transport = transport

    async def search(self, query: str) -> list[Paper]:
        """
        Fetch the first page of results for a search query.

        Raises:
            ArxivError: On non-2xx responses, transport failures or bad XML
        """
        params = {"search_query": query, "start": 0, "max_results": self.max_results}
        logger.info("arxiv_search", query=query, max_results=self.max_results)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ArxivError(
                f"HTTP error! Status: {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise ArxivError(f"arXiv request failed: {e}", details={"query": query}) from e

        papers = parse_feed(response.text)
        logger.info("arxiv_results", query=query, count=len(papers))
        return papers


async def fetch_arxiv(query: str, base_url: str = DEFAULT_ARXIV_URL, max_results: int = 5) -> list[Paper]:
    """Convenience wrapper for a one-off search."""
    return await ArxivClient(base_url=base_url, max_results=max_results).search(query)
