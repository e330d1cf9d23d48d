"""
Mutable AI state for a single turn.

Wraps the transcript of one chat while a turn is being processed. The
transcript only ever grows: updates must keep every existing message in
place, and the turn is finalised exactly once with done().
"""

import asyncio
from collections.abc import Awaitable, Callable

from ..exceptions import AIStateError
from ..models.messages import AIState, Message
from ..utils.logging import get_logger
from .streaming import run_async_fn_without_blocking

OnSetAIState = Callable[[AIState], Awaitable[None]]


class MutableAIState:
    """
    Append-only view of the AI state during a turn.

    Example:
        state = MutableAIState(AIState(chat_id="c1"), on_done=save)
        state.append(Message(role="user", content="hi"))
        state.done()  # fires save(...) without blocking
    """

    def __init__(self, initial: AIState, on_done: OnSetAIState | None = None):
        self._state = AIState(chat_id=initial.chat_id, messages=list(initial.messages))
        self._on_done = on_done
        self._done = False
        self.pending: asyncio.Task | None = None
        self.logger = get_logger(__name__)

    @property
    def is_done(self) -> bool:
        return self._done

    def get(self) -> AIState:
        """Snapshot of the current transcript."""
        return AIState(chat_id=self._state.chat_id, messages=list(self._state.messages))

    def update(self, state: AIState) -> None:
        """
        Replace the in-flight state.

        Raises:
            AIStateError: If the turn is already done, the chat id changes,
                or existing messages were dropped, reordered or rewritten
        """
        if self._done:
            raise AIStateError("AI state was already finalised for this turn", self._state.chat_id)

        if state.chat_id != self._state.chat_id:
            raise AIStateError(
                f"Cannot move transcript to chat '{state.chat_id}'", self._state.chat_id
            )

        current = self._state.messages
        if state.messages[: len(current)] != current:
            raise AIStateError("Transcript is append-only; existing messages changed", self._state.chat_id)

        self._state = AIState(chat_id=state.chat_id, messages=list(state.messages))

    def append(self, *messages: Message) -> None:
        self.update(AIState(chat_id=self._state.chat_id, messages=[*self._state.messages, *messages]))

    def done(self, state: AIState | None = None) -> None:
        """
        Finalise the state for this turn and fire the on_set hook.

        Raises:
            AIStateError: If called twice
        """
        if self._done:
            raise AIStateError("AI state was already finalised for this turn", self._state.chat_id)
        if state is not None:
            self.update(state)
        self._done = True

        self.logger.debug(
            "ai_state_done",
            chat_id=self._state.chat_id,
            message_count=len(self._state.messages),
        )

        if self._on_done is not None:
            self.pending = run_async_fn_without_blocking(
                self._on_done(self.get()), name=f"on_set_ai_state:{self._state.chat_id}"
            )
