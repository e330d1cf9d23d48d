"""
System prompt for the research assistant.
"""

from ..ui.selection import CATEGORY_CATALOG

BASE_PROMPT = """\
You are an arXiv research paper assistant. You can help users find and discuss research papers from various scientific fields.
You can ask follow-up questions to clarify the user's request and provide more accurate results."""

RESEARCH_PROMPT = """\
If the user mentions a main category (e.g., "Computer Science"), you MUST use the `show_category_selection` function to display its subcategories.
To do this, follow these steps:
1. Identify the main category mentioned by the user.
2. Look up the subcategories for that main category in the list below.
3. Call show_category_selection with these subcategories, using the main category as the title.

Here are the main categories and their subcategories:

{categories}

If you need to ask about a date range, use the `show_date_range_selection` function.
If you want to display research papers, use the `show_research_papers` function."""

WEB_SEARCH_PROMPT = """\
If the user asks about recent events or facts you are not sure about, use the `search_web` function \
with the full question as `query` and a few keywords as `concised_query`."""

STOCKS_PROMPT = """\
If the user asks for a stock price, use `show_stock_price`. If the user wants to see trending stocks, use `list_stocks`."""

CLOSING = "Besides that, you can also chat with users and provide information about scientific research and arXiv."

RESEARCH_TOOLS = frozenset({"show_category_selection", "show_date_range_selection", "show_research_papers"})


def format_categories(catalog: dict[str, list[str]] | None = None) -> str:
    catalog = CATEGORY_CATALOG if catalog is None else catalog
    blocks = []
    for main, subcategories in catalog.items():
        lines = [f"{main}:"] + [f"- {sub}" for sub in subcategories]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_system_prompt(tool_names: list[str]) -> str:
    """
    Assemble the system prompt for the tools that are registered.

    Args:
        tool_names: Names of the tools offered this turn
    """
    sections = [BASE_PROMPT]
    if RESEARCH_TOOLS.issubset(tool_names):
        sections.append(RESEARCH_PROMPT.format(categories=format_categories()))
    if "search_web" in tool_names:
        sections.append(WEB_SEARCH_PROMPT)
    if "show_stock_price" in tool_names or "list_stocks" in tool_names:
        sections.append(STOCKS_PROMPT)
    sections.append(CLOSING)
    return "\n\n".join(sections)
