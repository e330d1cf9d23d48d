"""
Turn dispatch - the submit_user_message action.

A turn appends the user's message to the transcript, opens an LLM stream
with the registered tools and returns immediately with a UI stream that
starts on a spinner. A background task then consumes the LLM stream:

- text deltas are streamed into a BotMessage and, once complete, appended
  to the transcript as an assistant message;
- each tool call runs its UI tool, forwarding every node the tool yields
  to the UI stream; the tool records its own call/result pair.

The transcript is finalised exactly once per turn, after text and tools are
handled. A failure closes the UI stream with the error but the state is
still finalised, so the user's message is never lost.
"""

import time
from typing import Any

from ..exceptions import ChatError, ChatInputError, ToolExecutionError
from ..llm.catalog import ModelCatalog, ModelConfig
from ..llm.client import LLMClient, StreamFinished, TextDelta, ToolCallRequest
from ..models.enums import MessageRole
from ..models.messages import Message, UIMessage, to_llm_messages
from ..models.ui import BotMessage, Fragment, SpinnerMessage, UINode
from ..tools.registry import ToolContext, ToolRegistry
from ..utils.ids import new_id
from ..utils.logging import get_logger, turn_context
from .config import ChatConfig
from .prompts import build_system_prompt
from .state import MutableAIState
from .streaming import StreamableText, StreamableUI, run_async_fn_without_blocking

logger = get_logger(__name__)


def compose(finals: list[UINode], node: UINode) -> UINode:
    """Display of finished nodes followed by the one still in progress."""
    if not finals:
        return node
    return Fragment(children=[*finals, node])


class TurnDispatcher:
    """
    Runs user turns against the model and the tool registry.

    Example:
        dispatcher = TurnDispatcher(llm, registry, catalog, config)
        message = await dispatcher.submit_user_message(state, "Find papers on GNNs")
        final = await message.display.final()
    """

    def __init__(
        self,
        llm: LLMClient,
        registry: ToolRegistry,
        catalog: ModelCatalog,
        config: ChatConfig,
    ):
        self.llm = llm
        self.registry = registry
        self.catalog = catalog
        self.config = config

    def resolve_model(self, alias: str | None, images: list[str]) -> ModelConfig:
        """
        Raises:
            ConfigurationError: If the alias is unknown
            ChatInputError: If images are attached for a model without vision
        """
        model = self.catalog.get(alias or self.config.default_model)
        if images and not model.supports_vision:
            raise ChatInputError(
                f"Model '{model.alias}' does not accept images",
                details={"model": model.alias, "vision_models": self.catalog.vision_models()},
            )
        return model

    async def submit_user_message(
        self,
        state: MutableAIState,
        content: str,
        model: str | None = None,
        images: list[str] | None = None,
    ) -> UIMessage:
        """
        Start a turn and return its live display.

        Args:
            state: Mutable AI state of the chat
            content: The user's text
            model: Model alias (defaults to the configured model)
            images: Data URLs of attached images

        Returns:
            UIMessage whose display is the turn's UIStream

        Raises:
            ChatInputError: If the turn is empty or carries unsupported images
            ConfigurationError: If the model alias is unknown
        """
        images = images or []
        if not content.strip() and not images:
            raise ChatInputError("Message cannot be empty")

        model_config = self.resolve_model(model, images)

        state.append(Message(role=MessageRole.USER, content=content, images=images))

        tool_names = self.registry.list_tools() if model_config.supports_tools else []
        system_prompt = build_system_prompt(tool_names)
        messages = [{"role": "system", "content": system_prompt}, *to_llm_messages(state.get().messages)]

        ctx = ToolContext(
            state=state,
            llm=self.llm,
            model=model_config.litellm_model,
            config=self.config,
            system_prompt=system_prompt,
        )
        tools = self.registry.schemas() if tool_names else None

        ui = StreamableUI(SpinnerMessage())
        logger.info(
            "turn_started",
            chat_id=state.get().chat_id,
            model=model_config.alias,
            images=len(images),
            tools=len(tool_names),
        )
        run_async_fn_without_blocking(
            self._run_turn(ui, ctx, messages, tools),
            name=f"turn:{state.get().chat_id}",
        )
        return UIMessage(id=new_id(), display=ui.value)

    async def _run_turn(
        self,
        ui: StreamableUI,
        ctx: ToolContext,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
    ) -> None:
        with turn_context(chat_id=ctx.state.get().chat_id, model=ctx.model):
            await self._stream_turn(ui, ctx, messages, tools)

    async def _stream_turn(
        self,
        ui: StreamableUI,
        ctx: ToolContext,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None,
    ) -> None:
        state = ctx.state
        started = time.perf_counter()

        text: StreamableText | None = None
        finals: list[UINode] = []
        tool_calls = 0
        failure: Exception | None = None

        def close_text() -> None:
            if text is None or text.closed:
                return
            text.done()
            state.append(Message(role=MessageRole.ASSISTANT, content=text.text))
            finals.append(BotMessage(content=text))

        try:
            async for event in self.llm.stream_chat(messages=messages, tools=tools, model=ctx.model):
                if isinstance(event, TextDelta):
                    if text is None:
                        text = StreamableText()
                        ui.update(compose(finals, BotMessage(content=text)))
                    text.update(event.delta)

                elif isinstance(event, ToolCallRequest):
                    close_text()
                    tool_calls += 1
                    node = await self._run_tool(event, ctx, ui, finals)
                    if node is not None:
                        finals.append(node)

                elif isinstance(event, StreamFinished):
                    close_text()

            close_text()
        except Exception as e:
            failure = e
            if text is not None and not text.closed:
                text.done()

        # Persist first so the display only settles once the transcript is final
        if not state.is_done:
            state.done()

        duration_ms = (time.perf_counter() - started) * 1000
        if failure is not None:
            error_info = failure.to_dict() if isinstance(failure, ChatError) else {"error": str(failure)}
            logger.error("turn_failed", duration_ms=round(duration_ms, 1), **error_info)
            ui.error(failure)
            return

        if not finals:
            final: UINode = BotMessage(content="")
        elif len(finals) == 1:
            final = finals[0]
        else:
            final = Fragment(children=finals)

        logger.info(
            "turn_completed",
            tool_calls=tool_calls,
            duration_ms=round(duration_ms, 1),
        )
        ui.done(final)

    async def _run_tool(
        self,
        call: ToolCallRequest,
        ctx: ToolContext,
        ui: StreamableUI,
        finals: list[UINode],
    ) -> UINode | None:
        """Run one tool call, forwarding its nodes; returns its last node."""
        tool = self.registry.get(call.name)
        args = tool.parse_args(call.arguments)

        started = time.perf_counter()
        last: UINode | None = None
        try:
            async for node in tool.generate(args, ctx):
                last = node
                ui.update(compose(finals, node))
        except ChatError:
            raise
        except Exception as e:
            raise ToolExecutionError(
                f"Tool '{call.name}' failed: {e}",
                tool_name=call.name,
                details={"error_type": type(e).__name__},
            ) from e

        logger.info(
            "tool_executed",
            tool_name=call.name,
            tool_call_id=call.id,
            duration_ms=round((time.perf_counter() - started) * 1000, 1),
        )
        return last
