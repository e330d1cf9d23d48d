"""
UI tool registry.

A UI tool is an async generator: it yields interim UI nodes while it works
and its last yielded node is the final display for the turn. Each tool also
owns a renderer that rebuilds its display from a recorded tool result when a
saved chat is reloaded.
"""

import asyncio
from collections.abc import AsyncIterator, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from ..core.state import MutableAIState
from ..exceptions import ToolExecutionError
from ..models.messages import ToolResultPart, tool_call_message, tool_result_message
from ..models.ui import UINode
from ..utils.ids import new_id
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..core.config import ChatConfig
    from ..llm.client import LLMClient

logger = get_logger(__name__)


@dataclass
class ToolContext:
    """What a running tool can reach: the turn's state and the model."""

    state: MutableAIState
    llm: "LLMClient"
    model: str
    config: "ChatConfig"
    system_prompt: str = ""

    async def pause(self) -> None:
        """Give the interim UI a moment on screen."""
        if self.config.tool_ui_delay_seconds:
            await asyncio.sleep(self.config.tool_ui_delay_seconds)

    def record(self, tool_name: str, args: dict[str, Any], result: Any) -> str:
        """
        Append the tool-call / tool-result message pair to the transcript.

        Returns:
            The tool_call_id shared by both messages
        """
        tool_call_id = new_id()
        self.state.append(
            tool_call_message(tool_name, tool_call_id, args),
            tool_result_message(tool_name, tool_call_id, result),
        )
        logger.info("tool_recorded", tool_name=tool_name, tool_call_id=tool_call_id)
        return tool_call_id


ToolGenerator = Callable[[Any, ToolContext], AsyncIterator[UINode]]
ToolRenderer = Callable[[Any], UINode | None]


@dataclass
class UITool:
    name: str
    description: str
    parameters: type[BaseModel]
    generate: ToolGenerator
    render: ToolRenderer | None = None

    def schema(self) -> dict[str, Any]:
        """Function schema in OpenAI tool format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters.model_json_schema(),
            },
        }

    def parse_args(self, raw: dict[str, Any]) -> BaseModel:
        try:
            return self.parameters.model_validate(raw)
        except ValidationError as e:
            raise ToolExecutionError(
                f"Invalid arguments for tool '{self.name}': {e.error_count()} error(s)",
                tool_name=self.name,
                details={"arguments": raw, "errors": e.errors(include_url=False)},
            ) from e


class ToolRegistry:
    """
    Registry of UI tools offered to the model.

    Example:
        registry = ToolRegistry()

        class Args(BaseModel):
            query: str

        @registry.tool("echo", "Echo the query back", Args)
        async def echo(args, ctx):
            ctx.record("echo", args.model_dump(), args.query)
            yield SystemMessage(content=args.query)

        @registry.renderer("echo")
        def render_echo(result):
            return SystemMessage(content=result)
    """

    def __init__(self):
        self._tools: dict[str, UITool] = {}

    def register(self, tool: UITool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If the tool name is already registered
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool
        logger.debug("tool_registered", tool_name=tool.name)

    def tool(self, name: str, description: str, parameters: type[BaseModel]) -> Callable:
        """Decorator to register an async generator as a UI tool."""
        def decorator(func: ToolGenerator) -> ToolGenerator:
            self.register(UITool(name=name, description=description, parameters=parameters, generate=func))
            return func
        return decorator

    def renderer(self, name: str) -> Callable:
        """Decorator attaching the reload renderer of a registered tool."""
        def decorator(func: ToolRenderer) -> ToolRenderer:
            self.get(name).render = func
            return func
        return decorator

    def get(self, name: str) -> UITool:
        """
        Raises:
            ToolExecutionError: If no tool has this name
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolExecutionError(f"Tool '{name}' not found in registry", tool_name=name)
        return tool

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> list[str]:
        return list(self._tools.keys())

    def schemas(self) -> list[dict[str, Any]]:
        return [tool.schema() for tool in self._tools.values()]

    def render_result(self, part: ToolResultPart) -> UINode | None:
        """Rebuild the display of a recorded result; None for unknown tools."""
        tool = self._tools.get(part.tool_name)
        if tool is None or tool.render is None:
            return None
        return tool.render(part.result)
