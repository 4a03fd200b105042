"""
Stream relay: forwards text deltas from a generation stream to a sink.

State machine: IDLE -> STREAMING -> CLOSED | ERRORED. Everything forwarded
before a fault stays delivered; the sink is failed rather than closed so the
consumer sees a truncated stream.
"""

import asyncio
import contextlib
import logging
from enum import Enum
from typing import AsyncIterable, AsyncIterator, Optional, Protocol

from ..models.generation import FailureInfo, StreamEvent
from ..resilience.errors import CollaboratorError


logger = logging.getLogger(__name__)


class RelayState(str, Enum):
    IDLE = "idle"
    STREAMING = "streaming"
    CLOSED = "closed"
    ERRORED = "errored"


class StreamSink(Protocol):
    async def send(self, fragment: bytes) -> None: ...

    async def close(self) -> None: ...

    async def fail(self, error: BaseException) -> None: ...


class _Closed:
    pass


class _Failed:
    def __init__(self, error: BaseException):
        self.error = error


_CLOSED = _Closed()


class ChannelSink:
    """
    Single-slot channel between the relay and a consumer.

    ``send`` suspends until the consumer has taken the previous fragment,
    so a slow consumer slows the relay down. Iterating the sink yields
    fragments in order, stops on close and raises the relayed error on fail.
    """

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=1)

    async def send(self, fragment: bytes) -> None:
        await self._queue.put(fragment)

    async def close(self) -> None:
        await self._queue.put(_CLOSED)

    async def fail(self, error: BaseException) -> None:
        await self._queue.put(_Failed(error))

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            if isinstance(item, _Failed):
                raise item.error
            yield item


class PrimedStream:
    """
    A stream whose first event has already been received.

    Pulling the first event is what "establishing" a stream means to the
    orchestrator; this wrapper hands that event back before the rest.
    """

    def __init__(self, first: Optional[StreamEvent], rest: AsyncIterator[StreamEvent]):
        self._first = first
        self._rest = rest

    @classmethod
    async def open(cls, events: AsyncIterable[StreamEvent]) -> "PrimedStream":
        iterator = events.__aiter__()
        try:
            first = await iterator.__anext__()
        except StopAsyncIteration:
            first = None
        return cls(first, iterator)

    async def __aiter__(self) -> AsyncIterator[StreamEvent]:
        if self._first is None:
            return
        yield self._first
        async for event in self._rest:
            yield event


class StreamRelay:
    """Relays text deltas from one upstream stream into one sink."""

    def __init__(self, idle_timeout: Optional[float] = None, encoding: str = "utf-8"):
        self.idle_timeout = idle_timeout
        self.encoding = encoding
        self.state = RelayState.IDLE
        self.fragments_relayed = 0
        self.bytes_relayed = 0

    async def _next_event(self, iterator: AsyncIterator[StreamEvent]) -> StreamEvent:
        if self.idle_timeout is None:
            return await iterator.__anext__()
        try:
            return await asyncio.wait_for(iterator.__anext__(), timeout=self.idle_timeout)
        except asyncio.TimeoutError as e:
            raise CollaboratorError(FailureInfo(
                message=f"Stream stalled: no fragment within {self.idle_timeout}s timeout",
                raw_cause=e,
            )) from e

    async def run(self, upstream: AsyncIterable[StreamEvent], sink: StreamSink) -> RelayState:
        iterator = upstream.__aiter__()
        try:
            while True:
                try:
                    event = await self._next_event(iterator)
                except StopAsyncIteration:
                    break

                if self.state == RelayState.IDLE:
                    self.state = RelayState.STREAMING

                if not event.is_text_delta:
                    continue

                fragment = event.text.encode(self.encoding)
                await sink.send(fragment)
                self.fragments_relayed += 1
                self.bytes_relayed += len(fragment)
        except Exception as e:
            self.state = RelayState.ERRORED
            logger.error(
                f"Streaming error after {self.fragments_relayed} fragments "
                f"({self.bytes_relayed} bytes): {e}"
            )
            await sink.fail(e)
            return self.state

        self.state = RelayState.CLOSED
        logger.info(f"Stream complete: {self.fragments_relayed} fragments, {self.bytes_relayed} bytes")
        await sink.close()
        return self.state


async def relay(
    upstream: AsyncIterable[StreamEvent],
    sink: StreamSink,
    idle_timeout: Optional[float] = None,
) -> RelayState:
    """Relay ``upstream`` into ``sink`` and return the terminal state."""
    return await StreamRelay(idle_timeout=idle_timeout).run(upstream, sink)


async def relay_to_body(
    upstream: AsyncIterable[StreamEvent],
    stream_relay: Optional[StreamRelay] = None,
) -> AsyncIterator[bytes]:
    """
    Response-body iterator fed by a background relay task.

    Closing the iterator early (client disconnect) cancels the relay.
    """
    stream_relay = stream_relay or StreamRelay()
    sink = ChannelSink()
    task = asyncio.create_task(stream_relay.run(upstream, sink))
    try:
        async for fragment in sink:
            yield fragment
    finally:
        if not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
