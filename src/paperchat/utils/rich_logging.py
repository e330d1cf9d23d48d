"""Console output with the Rich library"""

from typing import TYPE_CHECKING, Optional

import structlog
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme
from rich.traceback import install as install_rich_traceback

if TYPE_CHECKING:
    from ..core.config import ChatConfig
    from ..llm.catalog import ModelCatalog

PAPERCHAT_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "success": "bold green",
        "user": "bold blue",
        "assistant": "green",
        "tool": "magenta",
        "paper": "bold cyan",
    }
)


class ChatConsole:
    """Singleton console with paperchat branding and theme"""

    _instance: Optional["ChatConsole"] = None

    def __new__(cls) -> "ChatConsole":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not hasattr(self, "initialized"):
            self.console = Console(theme=PAPERCHAT_THEME)
            self.initialized = True

    def print_banner(self):
        """Print startup banner"""
        self.console.print(
            Panel.fit(
                "[bold cyan]paperchat[/bold cyan] - arXiv research assistant\n"
                "[dim]Type a question, /exit to leave[/dim]",
                border_style="cyan",
            )
        )

    def print_config_summary(self, config: "ChatConfig", catalog: "ModelCatalog"):
        """Print configuration summary table"""
        table = Table(title="Configuration", show_header=False, border_style="cyan")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="yellow")

        model = catalog.get(config.default_model)
        table.add_row("Model", f"{model.label} ({model.litellm_model})")
        table.add_row("Vision", "yes" if model.supports_vision else "no")
        table.add_row("arXiv results", str(config.arxiv_max_results))
        table.add_row("Web search", "Enabled" if config.web_search_enabled else "Disabled (no API key)")
        table.add_row("Chat store", str(config.store_dir))

        self.console.print(table)

    def print_models(self, catalog: "ModelCatalog", selected: str | None = None):
        """Print the selectable models"""
        table = Table(title="Models", border_style="cyan")
        table.add_column("Alias", style="cyan", no_wrap=True)
        table.add_column("Name")
        table.add_column("Provider model", style="dim")
        table.add_column("Images", justify="center")

        for model in catalog.list_models():
            alias = f"[bold]{model.alias}[/bold] *" if model.alias == selected else model.alias
            name = f"{model.label} [warning](rate limited)[/warning]" if model.rate_limited else model.label
            table.add_row(alias, name, model.litellm_model, "✓" if model.supports_vision else "")

        self.console.print(table)

    def print_success(self, message: str):
        """Print success message"""
        self.console.print(f"[success]✓[/success] {message}")

    def print_error(self, message: str):
        """Print error message"""
        self.console.print(f"[error]✗[/error] {message}")

    def print_warning(self, message: str):
        """Print warning message"""
        self.console.print(f"[warning]⚠[/warning] {message}")

    def print_info(self, message: str):
        """Print info message"""
        self.console.print(f"[info]ℹ[/info] {message}")


# Global console instance
console = ChatConsole()


def setup_rich_logging() -> None:
    """
    Install Rich's traceback handler globally.

    structlog configuration is handled separately in utils/logging.py.
    """
    install_rich_traceback(
        show_locals=True,
        width=120,
        extra_lines=3,
        theme="monokai",
        word_wrap=False,
        suppress=[structlog],
    )
