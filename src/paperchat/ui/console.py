"""
Terminal rendering of UI nodes with Rich.
"""

from typing import Any

from rich.console import Group, RenderableType
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table
from rich.text import Text

from ..models.ui import (
    ArxivResponse,
    BotCard,
    BotMessage,
    CategoryMultiSelect,
    DateSelect,
    ErrorMessage,
    Fragment,
    SpinnerMessage,
    StockCard,
    StockList,
    SystemMessage,
    ToolMessage,
    UINode,
    UserMessage,
)


def _papers_table(node: ArxivResponse) -> RenderableType:
    if not node.papers:
        return Text("No papers found.", style="warning")

    table = Table(title="arXiv papers", border_style="cyan", show_lines=True)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="paper")
    table.add_column("Authors")
    table.add_column("Published", no_wrap=True)
    table.add_column("PDF", style="dim")

    for i, paper in enumerate(node.papers, start=1):
        authors = ", ".join(paper.authors[:3]) + (" et al." if len(paper.authors) > 3 else "")
        table.add_row(str(i), paper.title, authors, paper.published[:10], paper.pdf_url or "")
    return table


def _numbered(title: str, options: list[str]) -> RenderableType:
    lines = [f"[bold]{escape(title)}[/bold]"] + [
        f"  [cyan]{i}.[/cyan] {escape(option)}" for i, option in enumerate(options, start=1)
    ]
    return Text.from_markup("\n".join(lines))


def _quote_line(symbol: str, price: float, delta: float) -> str:
    style = "success" if delta >= 0 else "error"
    return f"[bold]{escape(symbol)}[/bold]  ${price:,.2f}  [{style}]{delta:+.2f}[/{style}]"


def render_node(node: UINode | None) -> RenderableType:
    """Rich renderable for a single node."""
    if node is None:
        return Text("")

    if isinstance(node, SpinnerMessage):
        return Spinner("dots", text="Thinking...")
    if isinstance(node, UserMessage):
        suffix = f"\n[dim]{len(node.images)} image(s) attached[/dim]" if node.images else ""
        return Text.from_markup(f"[user]You:[/user] {escape(node.content)}{suffix}")
    if isinstance(node, ToolMessage):
        body: list[RenderableType] = [Markdown(node.text or "")]
        if node.concised_query:
            body.append(Text(f"Searched: {node.concised_query}  {node.search_url}", style="dim"))
        return Panel(Group(*body), title="web", border_style="magenta")
    if isinstance(node, BotMessage):
        return Markdown(node.text or "")
    if isinstance(node, SystemMessage):
        return Text(node.content, style="dim")
    if isinstance(node, BotCard):
        return Panel(render_node(node.child), border_style="green")
    if isinstance(node, CategoryMultiSelect):
        return _numbered(f"{node.title}: pick one or more subcategories", node.categories)
    if isinstance(node, DateSelect):
        return _numbered("Pick a date range", node.ranges)
    if isinstance(node, ArxivResponse):
        return _papers_table(node)
    if isinstance(node, StockCard):
        return Text.from_markup(_quote_line(node.quote.symbol, node.quote.price, node.quote.delta))
    if isinstance(node, StockList):
        return Text.from_markup("\n".join(_quote_line(q.symbol, q.price, q.delta) for q in node.quotes))
    if isinstance(node, Fragment):
        return Group(*(render_node(child) for child in node.children))
    if isinstance(node, ErrorMessage):
        return Text(node.message, style="error")

    return Text(str(node.to_dict()), style="dim")


def render_display(display: Any) -> RenderableType:
    """Renderable for a UIMessage display (node, list of nodes or None)."""
    if isinstance(display, list):
        return Group(*(render_node(node) for node in display if node is not None))
    if isinstance(display, UINode):
        return render_node(display)
    return Text("")


def find_picker(display: Any) -> CategoryMultiSelect | DateSelect | None:
    """The picker a display is waiting on, if any."""
    if isinstance(display, BotCard):
        return find_picker(display.child)
    if isinstance(display, Fragment):
        for child in reversed(display.children):
            picker = find_picker(child)
            if picker is not None:
                return picker
    if isinstance(display, (CategoryMultiSelect, DateSelect)):
        return display
    return None
