"""
External services the tools call into.
"""

from .arxiv import ArxivClient, Paper, PaperLink, fetch_arxiv, parse_feed
from .web_search import SearchResult, WebSearchClient, format_results_for_prompt

__all__ = [
    "ArxivClient",
    "Paper",
    "PaperLink",
    "parse_feed",
    "fetch_arxiv",
    "WebSearchClient",
    "SearchResult",
    "format_results_for_prompt",
]
