"""
Research tools: the category picker, the date picker and the arXiv results card.

The three tools form the paper-search flow. The model shows the category
picker, the user's pick comes back as a new turn asking for the date picker,
and the date pick triggers the paper search.
"""

from pydantic import BaseModel, Field

from ..integrations.arxiv import ArxivClient, Paper
from ..models.ui import (
    ArxivResponse,
    BotCard,
    CategoryMultiSelect,
    DateSelect,
    SpinnerMessage,
)
from ..ui.selection import DATE_RANGES
from ..utils.logging import get_logger
from .registry import ToolContext, ToolRegistry

logger = get_logger(__name__)


class CategorySelectionArgs(BaseModel):
    categories: list[str] = Field(..., description="Subcategories of the chosen main category")
    title: str = Field(..., description="Name of the main category")


class DateRangeSelectionArgs(BaseModel):
    pass


class ResearchPapersArgs(BaseModel):
    query: str = Field(..., description="The query about which user wants the research papers")
    time: str = Field(default="", description="Start of the selected date range, e.g. 2024-01")


def build_arxiv_query(query: str, time: str = "") -> str:
    return " ".join(part for part in (query, time) if part)


def register_research_tools(registry: ToolRegistry, arxiv: ArxivClient) -> None:
    """Register the paper-search flow on ``registry``."""

    @registry.tool(
        "show_category_selection",
        "Show the subcategories of a main research category so the user can pick several.",
        CategorySelectionArgs,
    )
    async def show_category_selection(args: CategorySelectionArgs, ctx: ToolContext):
        card = BotCard(child=CategoryMultiSelect(categories=args.categories, title=args.title))
        yield card
        await ctx.pause()
        ctx.record("show_category_selection", args.model_dump(), args.model_dump())
        yield card

    @registry.renderer("show_category_selection")
    def render_category_selection(result):
        return BotCard(
            child=CategoryMultiSelect(categories=result.get("categories", []), title=result.get("title", ""))
        )

    @registry.tool(
        "show_date_range_selection",
        "Ask the user for the publication date range of the papers.",
        DateRangeSelectionArgs,
    )
    async def show_date_range_selection(args: DateRangeSelectionArgs, ctx: ToolContext):
        card = BotCard(child=DateSelect(ranges=list(DATE_RANGES)))
        yield card
        await ctx.pause()
        ctx.record("show_date_range_selection", {}, {})
        yield card

    @registry.renderer("show_date_range_selection")
    def render_date_range_selection(result):
        return BotCard(child=DateSelect(ranges=list(DATE_RANGES)))

    @registry.tool(
        "show_research_papers",
        "Search arXiv and show research papers about the query published since the selected date.",
        ResearchPapersArgs,
    )
    async def show_research_papers(args: ResearchPapersArgs, ctx: ToolContext):
        yield SpinnerMessage()
        await ctx.pause()

        papers = await arxiv.search(build_arxiv_query(args.query, args.time))
        logger.info("research_papers_fetched", query=args.query, time=args.time, count=len(papers))

        ctx.record("show_research_papers", args.model_dump(), papers)
        yield BotCard(child=ArxivResponse(papers=papers))

    @registry.renderer("show_research_papers")
    def render_research_papers(result):
        papers = [Paper.model_validate(item) for item in result or []]
        return BotCard(child=ArxivResponse(papers=papers))
