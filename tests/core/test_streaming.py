"""
Tests for streamable text, streamable UI and fire-and-forget tasks.
"""

import asyncio

import pytest

from paperchat.core.streaming import StreamableText, StreamableUI, run_async_fn_without_blocking
from paperchat.exceptions import LLMError, StreamClosedError
from paperchat.models.ui import BotMessage, SpinnerMessage


class TestStreamableText:
    @pytest.mark.asyncio
    async def test_accumulates_and_iterates(self):
        text = StreamableText()
        text.update("Hel")
        text.update("lo")
        text.done()

        assert text.text == "Hello"
        assert text.closed
        assert [delta async for delta in text] == ["Hel", "lo"]

    @pytest.mark.asyncio
    async def test_done_with_final_delta(self):
        text = StreamableText("a")
        text.done("b")
        assert text.text == "ab"
        assert [delta async for delta in text] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_update_after_done(self):
        text = StreamableText()
        text.done()
        with pytest.raises(StreamClosedError):
            text.update("late")
        with pytest.raises(StreamClosedError):
            text.done()

    @pytest.mark.asyncio
    async def test_consumer_waits_for_producer(self):
        text = StreamableText()

        async def produce():
            for delta in ("a", "b", "c"):
                await asyncio.sleep(0)
                text.update(delta)
            text.done()

        producer = asyncio.create_task(produce())
        received = [delta async for delta in text]
        await producer
        assert "".join(received) == "abc"


class TestStreamableUI:
    @pytest.mark.asyncio
    async def test_snapshots_then_final(self):
        ui = StreamableUI(SpinnerMessage())
        ui.update(BotMessage(content="partial"))
        ui.done(BotMessage(content="final"))

        nodes = [node async for node in ui.value]
        assert isinstance(nodes[0], SpinnerMessage)
        assert [n.text for n in nodes[1:]] == ["partial", "final"]
        assert ui.current.text == "final"

    @pytest.mark.asyncio
    async def test_final(self):
        ui = StreamableUI(SpinnerMessage())
        ui.done(BotMessage(content="done"))
        final = await ui.value.final()
        assert final.text == "done"

    @pytest.mark.asyncio
    async def test_error_reaches_consumer(self):
        ui = StreamableUI(SpinnerMessage())
        ui.error(LLMError("boom", status_code=503))

        with pytest.raises(LLMError):
            await ui.value.final()
        assert ui.closed

    @pytest.mark.asyncio
    async def test_closed_stream_rejects_updates(self):
        ui = StreamableUI()
        ui.done()
        with pytest.raises(StreamClosedError):
            ui.update(SpinnerMessage())
        with pytest.raises(StreamClosedError):
            ui.error(RuntimeError("late"))


class TestRunWithoutBlocking:
    @pytest.mark.asyncio
    async def test_returns_task(self):
        async def work():
            return 42

        task = run_async_fn_without_blocking(work(), name="work")
        assert await task == 42

    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, mocker):
        logger = mocker.patch("paperchat.core.streaming.logger")

        async def fail():
            raise RuntimeError("save failed")

        task = run_async_fn_without_blocking(fail(), name="save")
        await asyncio.wait({task})
        await asyncio.sleep(0)

        logger.error.assert_called_once()
        assert logger.error.call_args.kwargs["error"] == "save failed"
