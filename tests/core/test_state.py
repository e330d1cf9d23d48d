"""
Tests for the mutable AI state.
"""

from unittest.mock import AsyncMock

import pytest

from paperchat.core.state import MutableAIState
from paperchat.exceptions import AIStateError
from paperchat.models.enums import MessageRole
from paperchat.models.messages import AIState, Message


def user(text):
    return Message(role=MessageRole.USER, content=text)


class TestMutableAIState:
    def test_append_and_get(self, state):
        state.append(user("hi"))
        snapshot = state.get()
        assert snapshot.chat_id == "chat-1"
        assert [m.content for m in snapshot.messages] == ["hi"]

    def test_get_returns_copy(self, state):
        state.append(user("hi"))
        state.get().messages.append(user("sneaky"))
        assert len(state.get().messages) == 1

    def test_update_must_extend(self, state):
        first = user("one")
        state.append(first)
        with pytest.raises(AIStateError, match="append-only"):
            state.update(AIState(chat_id="chat-1", messages=[user("replacement")]))

    def test_update_rejects_rewritten_message(self, state):
        state.append(Message(id="m1", role=MessageRole.USER, content="original question"))
        rewritten = Message(id="m1", role=MessageRole.USER, content="rewritten question")

        with pytest.raises(AIStateError, match="append-only"):
            state.update(AIState(chat_id="chat-1", messages=[rewritten]))
        assert state.get().messages[0].content == "original question"

    def test_update_rejects_changed_role(self, state):
        state.append(Message(id="m1", role=MessageRole.USER, content="hi"))
        with pytest.raises(AIStateError):
            state.update(
                AIState(chat_id="chat-1", messages=[Message(id="m1", role=MessageRole.ASSISTANT, content="hi")])
            )

    def test_update_may_extend(self, state):
        first = user("one")
        state.append(first)
        state.update(AIState(chat_id="chat-1", messages=[first, user("two")]))
        assert len(state.get().messages) == 2

    def test_chat_id_is_fixed(self, state):
        with pytest.raises(AIStateError):
            state.update(AIState(chat_id="other"))

    def test_initial_state_not_aliased(self):
        initial = AIState(chat_id="c", messages=[user("a")])
        state = MutableAIState(initial)
        state.append(user("b"))
        assert len(initial.messages) == 1

    @pytest.mark.asyncio
    async def test_done_fires_hook_once(self):
        on_done = AsyncMock()
        state = MutableAIState(AIState(chat_id="c"), on_done=on_done)
        state.append(user("hi"))

        state.done()
        await state.pending

        on_done.assert_awaited_once()
        saved = on_done.call_args.args[0]
        assert saved.chat_id == "c"
        assert saved.messages[0].content == "hi"

    @pytest.mark.asyncio
    async def test_done_with_state(self):
        on_done = AsyncMock()
        state = MutableAIState(AIState(chat_id="c"), on_done=on_done)
        final = AIState(chat_id="c", messages=[user("x")])

        state.done(final)
        await state.pending

        assert on_done.call_args.args[0].messages[0].content == "x"

    @pytest.mark.asyncio
    async def test_second_done_raises(self, state):
        state.done()
        assert state.is_done
        with pytest.raises(AIStateError):
            state.done()

    @pytest.mark.asyncio
    async def test_update_after_done_raises(self, state):
        state.done()
        with pytest.raises(AIStateError):
            state.append(user("late"))

    def test_done_without_hook_needs_no_loop(self, state):
        state.done()
        assert state.pending is None
