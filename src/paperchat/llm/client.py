"""
LLM Client Wrapper - Streaming chat completions through LiteLLM.

Turns provider stream chunks into three events the dispatcher understands:
text deltas, complete tool-call requests and a final finish marker.
"""

import json
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any, Union

import litellm
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import ChatError, LLMError
from ..utils.ids import new_id
from ..utils.logging import get_logger

TRANSIENT_ERRORS = (
    TimeoutError,
    ConnectionError,
    litellm.Timeout,
    litellm.APIConnectionError,
    litellm.RateLimitError,
    litellm.ServiceUnavailableError,
)


@dataclass
class TextDelta:
    """A piece of assistant text."""

    delta: str


@dataclass
class ToolCallRequest:
    """A fully assembled tool call."""

    id: str
    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class StreamFinished:
    """Emitted once, after every other event."""

    finish_reason: str | None
    text: str = ""


LLMEvent = Union[TextDelta, ToolCallRequest, StreamFinished]


class LLMClient:
    """
    Async LLM client using LiteLLM for multi-provider support.

    Example:
        client = LLMClient(default_model="openai/gpt-3.5-turbo")

        async for event in client.stream_chat(
            messages=[{"role": "user", "content": "Hello"}],
        ):
            if isinstance(event, TextDelta):
                print(event.delta, end="")
    """

    def __init__(
        self,
        default_model: str = "openai/gpt-3.5-turbo",
        provider_api_keys: dict[str, str] | None = None,
        max_retries: int = 3,
        timeout: int = 60,
        temperature: float = 0.7,
        retry_wait: float = 1.0,
    ):
        """
        Initialize LLM client.

        Args:
            default_model: Default model to use (LiteLLM format: "provider/model")
            provider_api_keys: API keys by provider prefix ("openai", "groq", ...)
            max_retries: Attempts when opening a stream fails transiently
            timeout: Request timeout in seconds
            temperature: Default sampling temperature
            retry_wait: Multiplier for the exponential backoff between attempts
        """
        self.default_model = default_model
        self.provider_api_keys = provider_api_keys or {}
        self.max_retries = max_retries
        self.timeout = timeout
        self.temperature = temperature
        self.retry_wait = retry_wait
        self.litellm = litellm
        self.logger = get_logger(__name__)

    def _api_key_for(self, model: str) -> str | None:
        provider = model.split("/")[0] if "/" in model else "openai"
        return self.provider_api_keys.get(provider)

    async def _open_stream(self, completion_kwargs: dict[str, Any]) -> Any:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.retry_wait, max=10),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        ):
            with attempt:
                return await self.litellm.acompletion(**completion_kwargs)

    async def stream_chat(
        self,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        model: str | None = None,
        temperature: float | None = None,
        **kwargs,
    ) -> AsyncIterator[LLMEvent]:
        """
        Stream a chat completion.

        Args:
            messages: Messages in OpenAI chat format
            tools: Optional tool schemas (OpenAI function format)
            model: Optional model override
            temperature: Optional temperature override
            **kwargs: Additional parameters for litellm.acompletion()

        Yields:
            TextDelta for each text chunk, one ToolCallRequest per tool call
            once the stream ends, then a StreamFinished

        Raises:
            LLMError: If the provider call fails
        """
        model = model or self.default_model

        completion_kwargs: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": True,
            "timeout": self.timeout,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if tools:
            completion_kwargs["tools"] = tools
        api_key = self._api_key_for(model)
        if api_key:
            completion_kwargs["api_key"] = api_key
        completion_kwargs.update(kwargs)

        self.logger.debug("llm_stream_opening", model=model, message_count=len(messages), tools=len(tools or []))

        text_parts: list[str] = []
        pending: dict[int, dict[str, Any]] = {}
        finish_reason = None

        try:
            response = await self._open_stream(completion_kwargs)

            async for chunk in response:
                if not chunk.choices:
                    continue
                choice = chunk.choices[0]
                delta = choice.delta

                content = getattr(delta, "content", None)
                if content:
                    text_parts.append(content)
                    yield TextDelta(content)

                # Tool call names and arguments arrive in fragments keyed by index
                for fragment in getattr(delta, "tool_calls", None) or []:
                    index = getattr(fragment, "index", None)
                    slot = pending.setdefault(0 if index is None else index, {"id": None, "name": "", "arguments": ""})
                    if getattr(fragment, "id", None):
                        slot["id"] = fragment.id
                    function = getattr(fragment, "function", None)
                    if function is not None:
                        if getattr(function, "name", None):
                            slot["name"] = function.name
                        slot["arguments"] += getattr(function, "arguments", None) or ""

                if choice.finish_reason:
                    finish_reason = choice.finish_reason

        except ChatError:
            raise
        except Exception as e:
            raise LLMError(
                f"LLM streaming failed: {str(e)}",
                details={"model": model, "error_type": type(e).__name__},
                status_code=getattr(e, "status_code", None),
            ) from e

        for index in sorted(pending):
            slot = pending[index]
            try:
                arguments = json.loads(slot["arguments"]) if slot["arguments"] else {}
            except json.JSONDecodeError as e:
                raise LLMError(
                    f"Model returned malformed arguments for tool '{slot['name']}'",
                    details={"model": model, "arguments": slot["arguments"]},
                ) from e
            yield ToolCallRequest(id=slot["id"] or new_id(), name=slot["name"], arguments=arguments)

        self.logger.debug(
            "llm_stream_finished",
            model=model,
            finish_reason=finish_reason,
            text_chars=sum(len(p) for p in text_parts),
            tool_calls=len(pending),
        )
        yield StreamFinished(finish_reason=finish_reason, text="".join(text_parts))
