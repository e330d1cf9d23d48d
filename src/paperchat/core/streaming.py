"""
Streaming side-channels between the chat core and the host.

``StreamableText`` carries token deltas of a single assistant message.
``StreamableUI`` carries successive UI node snapshots of one turn; its
``value`` is the ``UIStream`` handed to the client, which iterates it until
the server side calls ``done()`` or ``error()``.

Both are single-consumer channels backed by an asyncio.Queue.
"""

import asyncio
from collections.abc import AsyncIterator, Coroutine
from typing import Any

from ..exceptions import StreamClosedError
from ..utils.logging import get_logger

logger = get_logger(__name__)

_DONE = object()

# Strong references to fire-and-forget tasks until they finish
_background_tasks: set[asyncio.Task] = set()


class StreamableText:
    """
    An incrementally produced string.

    Example:
        text = StreamableText()
        text.update("Hel")
        text.update("lo")
        text.done()
        assert text.text == "Hello"
    """

    def __init__(self, initial: str = ""):
        self._text = initial
        self._closed = False
        self._queue: asyncio.Queue = asyncio.Queue()
        if initial:
            self._queue.put_nowait(initial)

    @property
    def text(self) -> str:
        """Everything received so far."""
        return self._text

    @property
    def closed(self) -> bool:
        return self._closed

    def update(self, delta: str) -> None:
        """
        Append a delta.

        Raises:
            StreamClosedError: If done() was already called
        """
        if self._closed:
            raise StreamClosedError("Cannot update a closed text stream")
        self._text += delta
        self._queue.put_nowait(delta)

    def done(self, delta: str | None = None) -> None:
        if delta:
            self.update(delta)
        if self._closed:
            raise StreamClosedError("Text stream is already closed")
        self._closed = True
        self._queue.put_nowait(_DONE)

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if item is _DONE:
                return
            yield item


class UIStream:
    """Client-side view of a StreamableUI."""

    def __init__(self, source: "StreamableUI"):
        self._source = source

    @property
    def current(self) -> Any:
        """The latest node, without waiting."""
        return self._source.current

    async def __aiter__(self) -> AsyncIterator[Any]:
        while True:
            kind, payload = await self._source._queue.get()
            if kind == "node":
                yield payload
            elif kind == "error":
                raise payload
            else:
                return

    async def final(self) -> Any:
        """Drain the stream and return the last node."""
        last = None
        async for node in self:
            last = node
        return last


class StreamableUI:
    """
    Server-side handle of a streamed UI display.

    The tool or text handler calls update() with interim nodes and done()
    with the final one. Errors close the stream and surface to the consumer.
    """

    def __init__(self, initial: Any = None):
        self._current = initial
        self._closed = False
        self._queue: asyncio.Queue = asyncio.Queue()
        if initial is not None:
            self._queue.put_nowait(("node", initial))
        self.value = UIStream(self)

    @property
    def current(self) -> Any:
        return self._current

    @property
    def closed(self) -> bool:
        return self._closed

    def update(self, node: Any) -> None:
        if self._closed:
            raise StreamClosedError("Cannot update a closed UI stream")
        self._current = node
        self._queue.put_nowait(("node", node))

    def done(self, node: Any = None) -> None:
        if node is not None:
            self.update(node)
        if self._closed:
            raise StreamClosedError("UI stream is already closed")
        self._closed = True
        self._queue.put_nowait(("done", None))

    def error(self, exc: BaseException) -> None:
        if self._closed:
            raise StreamClosedError("UI stream is already closed")
        self._closed = True
        self._queue.put_nowait(("error", exc))


def run_async_fn_without_blocking(coro: Coroutine[Any, Any, Any], name: str | None = None) -> asyncio.Task:
    """
    Schedule a coroutine on the running loop and return immediately.

    Failures are logged rather than raised since nobody awaits the task.
    """
    task = asyncio.get_running_loop().create_task(coro, name=name)
    _background_tasks.add(task)

    def _finished(t: asyncio.Task) -> None:
        _background_tasks.discard(t)
        if t.cancelled():
            logger.warning("background_task_cancelled", task=t.get_name())
            return
        exc = t.exception()
        if exc is not None:
            logger.error(
                "background_task_failed",
                task=t.get_name(),
                error_type=type(exc).__name__,
                error=str(exc),
            )

    task.add_done_callback(_finished)
    return task
