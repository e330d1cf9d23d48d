"""
Configuration management for paperchat.

Loads settings from environment variables and provides a centralized
configuration object for all components.

Configuration precedence (highest to lowest):
1. Explicit kwargs passed to ChatConfig
2. Environment variables (PAPERCHAT_* prefix)
3. .env file
4. pyproject.toml [tool.paperchat] section
5. Hardcoded defaults
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from ..models.enums import LogLevel

logger = logging.getLogger(__name__)


def load_pyproject_defaults() -> dict[str, Any]:
    """
    Load defaults from the [tool.paperchat] section in pyproject.toml.

    Returns:
        Dictionary of configuration overrides from pyproject.toml
    """
    pyproject_path = Path("pyproject.toml")

    if not pyproject_path.exists():
        return {}

    try:
        with pyproject_path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        logger.warning(f"Could not load pyproject.toml: {e}")
        return {}
    except tomllib.TOMLDecodeError as e:
        logger.warning(f"Could not parse pyproject.toml: {e}")
        return {}

    tool_config = data.get("tool", {}).get("paperchat", {})
    if tool_config:
        logger.debug(f"Loaded {len(tool_config)} settings from pyproject.toml")
    return tool_config


class PyProjectTomlSettingsSource(PydanticBaseSettingsSource):
    """A pydantic-settings source reading the [tool.paperchat] table."""

    def get_field_value(self, field_name: str, field_info: Any) -> tuple[Any, str, bool]:
        """Not used in this implementation."""
        return None, "", False

    def __call__(self) -> dict[str, Any]:
        return load_pyproject_defaults()


class ChatConfig(BaseSettings):
    """
    Main configuration for the chat core, its tools and the CLI host.
    """

    model_config = SettingsConfigDict(
        env_prefix="PAPERCHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Secret fields that should be excluded from exports by default
    SECRET_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "openai_api_key",
            "groq_api_key",
            "gemini_api_key",
            "brave_api_key",
        }
    )

    # Provider API keys (litellm also reads the providers' own env vars)
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    groq_api_key: str | None = Field(default=None, description="Groq API key (Llama 3)")
    gemini_api_key: str | None = Field(default=None, description="Google Gemini API key")

    # Model selection
    default_model: str = Field(
        default="gpt-3.5-turbo", description="Model alias used when a turn names none"
    )
    temperature: float = Field(default=0.7, description="Sampling temperature")
    llm_timeout: int = Field(default=60, description="Request timeout in seconds for LLM calls")
    llm_max_retries: int = Field(default=3, description="Attempts when opening an LLM stream")

    # arXiv
    arxiv_api_url: str = Field(
        default="https://export.arxiv.org/api/query", description="arXiv query endpoint"
    )
    arxiv_max_results: int = Field(default=5, description="Papers fetched per search")

    # Web search
    brave_api_key: str | None = Field(
        default=None, description="Brave Search API key; web search is disabled without it"
    )
    web_search_url: str = Field(
        default="https://api.search.brave.com/res/v1/web/search",
        description="Web search endpoint",
    )
    web_search_count: int = Field(default=5, description="Web results fed to the model")
    http_timeout: float = Field(default=10.0, description="Timeout for tool HTTP requests")

    # Tool UI
    tool_ui_delay_seconds: float = Field(
        default=1.0, description="Pause after a tool shows its interim UI"
    )

    # Persistence
    title_max_length: int = Field(default=100, description="Chat title length cut from first message")
    store_dir: Path = Field(default=Path("./data/chats"), description="Directory of the JSON chat store")

    # Monitoring and Logging
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    log_file: Path | None = Field(
        default=None,
        description="Path to main application log file (set to None to disable file logging)",
    )
    log_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Maximum log file size before rotation"  # 10MB
    )
    log_backup_count: int = Field(default=5, description="Number of backup log files to keep")
    enable_rich_console: bool = Field(
        default=True, description="Enable rich console output (banners, tables)"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            PyProjectTomlSettingsSource(settings_cls),
            file_secret_settings,
        )

    @field_validator("arxiv_max_results")
    @classmethod
    def validate_arxiv_max_results(cls, v: int) -> int:
        """arXiv caps a single page at 2000 entries"""
        if not 1 <= v <= 2000:
            raise ValueError(f"arxiv_max_results must be between 1 and 2000, got {v}")
        return v

    @field_validator("web_search_count")
    @classmethod
    def validate_web_search_count(cls, v: int) -> int:
        if not 1 <= v <= 20:
            raise ValueError(f"web_search_count must be between 1 and 20, got {v}")
        return v

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError(f"temperature must be 0.0-2.0, got {v}")
        return v

    @field_validator("tool_ui_delay_seconds")
    @classmethod
    def validate_tool_ui_delay(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"tool_ui_delay_seconds must be >= 0, got {v}")
        if v > 10:
            logger.warning(f"Very long tool_ui_delay_seconds ({v}). Tools will feel sluggish.")
        return v

    @field_validator("title_max_length", "llm_timeout", "llm_max_retries")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    @model_validator(mode="after")
    def validate_default_model(self) -> "ChatConfig":
        """The default model must be one the selector offers"""
        from ..llm.catalog import DEFAULT_MODELS

        if self.default_model not in DEFAULT_MODELS:
            raise ValueError(
                f"default_model '{self.default_model}' is not a known model. "
                f"Choose one of: {', '.join(DEFAULT_MODELS)}"
            )
        return self

    @property
    def web_search_enabled(self) -> bool:
        return bool(self.brave_api_key)

    def provider_api_keys(self) -> dict[str, str]:
        """API keys by litellm provider prefix, for the ones that are set."""
        keys = {
            "openai": self.openai_api_key,
            "groq": self.groq_api_key,
            "gemini": self.gemini_api_key,
        }
        return {provider: key for provider, key in keys.items() if key}

    def export_safe(self) -> dict[str, Any]:
        """Dump settings with secrets masked."""
        data = self.model_dump(mode="json")
        for field in self.SECRET_FIELDS:
            if data.get(field):
                data[field] = "***"
        return data

    def ensure_directories(self) -> None:
        """Ensure the store and log directories exist."""
        self.store_dir.mkdir(parents=True, exist_ok=True)
        if self.log_file and self.log_file.parent:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)


# Global configuration instance
_config: ChatConfig | None = None


def get_config() -> ChatConfig:
    """
    Get the global configuration instance.

    Returns:
        ChatConfig instance
    """
    global _config
    if _config is None:
        _config = ChatConfig()
    return _config


def set_config(config: ChatConfig) -> None:
    """Install an explicit configuration (CLI overrides, tests)."""
    global _config
    _config = config


def reset_config() -> None:
    """Reset the global configuration (mainly for testing)."""
    global _config
    _config = None
