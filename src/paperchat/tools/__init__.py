"""
UI tools the model can call.
"""

from ..core.config import ChatConfig
from ..integrations.arxiv import ArxivClient
from ..integrations.web_search import WebSearchClient
from .registry import ToolContext, ToolRegistry, UITool
from .research import register_research_tools
from .stocks import register_stock_tools
from .web import register_web_tools


def build_default_registry(
    config: ChatConfig,
    arxiv_client: ArxivClient | None = None,
    search_client: WebSearchClient | None = None,
) -> ToolRegistry:
    """
    Registry with every built-in tool the configuration allows.

    Web search is only offered when a search API key is configured or a
    client is passed in explicitly.
    """
    registry = ToolRegistry()

    arxiv_client = arxiv_client or ArxivClient(
        base_url=config.arxiv_api_url,
        max_results=config.arxiv_max_results,
        timeout=config.http_timeout,
    )
    register_research_tools(registry, arxiv_client)

    if search_client is None and config.web_search_enabled:
        search_client = WebSearchClient(
            api_key=config.brave_api_key,
            base_url=config.web_search_url,
            count=config.web_search_count,
            timeout=config.http_timeout,
        )
    if search_client is not None:
        register_web_tools(registry, search_client)

    register_stock_tools(registry)
    return registry


__all__ = [
    "ToolContext",
    "ToolRegistry",
    "UITool",
    "build_default_registry",
]
