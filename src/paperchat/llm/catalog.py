"""
Model catalog - the models a user can pick for a chat turn.

Maps the aliases shown in the model selector to LiteLLM model ids and
records what each model can do (tool calling, image input).
"""

from pydantic import BaseModel, Field

from ..exceptions import ConfigurationError


class ModelConfig(BaseModel):
    """Configuration for a selectable model."""

    alias: str = Field(..., description="Name the UI sends with a turn")
    label: str = Field(..., description="Human readable name for the selector")
    litellm_model: str = Field(..., description="Model name in LiteLLM format (provider/model)")
    supports_tools: bool = Field(default=True, description="Supports function calling")
    supports_vision: bool = Field(default=False, description="Accepts image attachments")
    rate_limited: bool = Field(default=False, description="Provider tier is prone to rate limits")


_DEFAULTS = [
    ModelConfig(alias="gpt-3.5-turbo", label="GPT 3.5", litellm_model="openai/gpt-3.5-turbo"),
    ModelConfig(alias="gpt-4", label="GPT-4", litellm_model="openai/gpt-4", supports_vision=True),
    ModelConfig(
        alias="gpt-4-turbo",
        label="GPT-4 Turbo",
        litellm_model="openai/gpt-4-turbo",
        supports_vision=True,
    ),
    ModelConfig(
        alias="gpt-4o-2024-05-13",
        label="GPT-4o",
        litellm_model="openai/gpt-4o-2024-05-13",
        supports_vision=True,
    ),
    ModelConfig(alias="llama3-70b-8192", label="Llama 3", litellm_model="groq/llama3-70b-8192"),
    ModelConfig(alias="gemini", label="Gemini", litellm_model="gemini/gemini-1.5-pro"),
    ModelConfig(
        alias="gemma-7b-it",
        label="Gemma 7B",
        litellm_model="groq/gemma-7b-it",
        rate_limited=True,
    ),
    ModelConfig(
        alias="mixtral-8x7b-32768",
        label="Mixtral 8x7B",
        litellm_model="groq/mixtral-8x7b-32768",
        rate_limited=True,
    ),
]

DEFAULT_MODELS: dict[str, ModelConfig] = {model.alias: model for model in _DEFAULTS}


class ModelCatalog:
    """
    Registry of selectable models.

    Example:
        catalog = ModelCatalog()
        model = catalog.get("gpt-4o-2024-05-13")
        model.litellm_model  # "openai/gpt-4o-2024-05-13"
    """

    def __init__(self, models: list[ModelConfig] | None = None):
        self.models: dict[str, ModelConfig] = {}
        for model in models if models is not None else _DEFAULTS:
            self.register_model(model)

    def register_model(self, config: ModelConfig) -> None:
        self.models[config.alias] = config

    def get(self, alias: str) -> ModelConfig:
        """
        Look up a model by alias.

        Raises:
            ConfigurationError: If the alias is unknown
        """
        try:
            return self.models[alias]
        except KeyError:
            raise ConfigurationError(f"Unknown model '{alias}'", field="model", value=alias) from None

    def list_models(self) -> list[ModelConfig]:
        return list(self.models.values())

    def vision_models(self) -> list[str]:
        return [alias for alias, model in self.models.items() if model.supports_vision]
