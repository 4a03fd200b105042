"""
Unit tests for the stream relay state machine.
"""

import asyncio
import pytest

from scriptflow.generation.relay import (
    ChannelSink,
    PrimedStream,
    RelayState,
    StreamRelay,
    relay,
    relay_to_body,
)
from scriptflow.models.generation import FailureInfo, StreamEvent
from scriptflow.resilience.errors import CollaboratorError


class RecordingSink:
    """Sink that keeps everything it receives."""

    def __init__(self):
        self.fragments = []
        self.closed = False
        self.error = None

    async def send(self, fragment):
        self.fragments.append(fragment)

    async def close(self):
        self.closed = True

    async def fail(self, error):
        self.error = error


async def events(*items):
    for item in items:
        if isinstance(item, BaseException):
            raise item
        yield item


def fault():
    return CollaboratorError(FailureInfo(message="connection reset", status_code=None))


class TestRelayOrdering:
    """Tests for fragment forwarding."""

    @pytest.mark.asyncio
    async def test_forwards_text_and_drops_other_events(self):
        sink = RecordingSink()
        upstream = events(
            StreamEvent.delta("a"),
            StreamEvent.delta("b"),
            StreamEvent.metadata({"usage": 3}),
            StreamEvent.delta("c"),
        )

        state = await relay(upstream, sink)

        assert state == RelayState.CLOSED
        assert sink.fragments == [b"a", b"b", b"c"]
        assert sink.closed
        assert sink.error is None

    @pytest.mark.asyncio
    async def test_unicode_fragments_are_encoded(self):
        sink = RecordingSink()
        await relay(events(StreamEvent.delta("café "), StreamEvent.delta("🎬")), sink)
        assert b"".join(sink.fragments).decode("utf-8") == "café 🎬"

    @pytest.mark.asyncio
    async def test_empty_upstream_closes_cleanly(self):
        sink = RecordingSink()
        stream_relay = StreamRelay()

        state = await stream_relay.run(events(), sink)

        assert state == RelayState.CLOSED
        assert sink.fragments == []
        assert sink.closed

    @pytest.mark.asyncio
    async def test_counts_fragments_and_bytes(self):
        stream_relay = StreamRelay()
        await stream_relay.run(events(StreamEvent.delta("ab"), StreamEvent.delta("cde")), RecordingSink())
        assert stream_relay.fragments_relayed == 2
        assert stream_relay.bytes_relayed == 5


class TestRelayFaults:
    """Tests for mid-stream failures."""

    @pytest.mark.asyncio
    async def test_fault_keeps_delivered_prefix(self):
        sink = RecordingSink()
        error = fault()
        upstream = events(StreamEvent.delta("a"), StreamEvent.delta("b"), error)

        state = await relay(upstream, sink)

        assert state == RelayState.ERRORED
        assert sink.fragments == [b"a", b"b"]
        assert sink.error is error
        assert not sink.closed

    @pytest.mark.asyncio
    async def test_fault_before_first_event(self):
        sink = RecordingSink()
        stream_relay = StreamRelay()

        state = await stream_relay.run(events(fault()), sink)

        assert state == RelayState.ERRORED
        assert sink.fragments == []

    @pytest.mark.asyncio
    async def test_idle_timeout_errors_stream(self):
        async def stalled():
            yield StreamEvent.delta("a")
            await asyncio.sleep(10)
            yield StreamEvent.delta("never")

        sink = RecordingSink()
        state = await StreamRelay(idle_timeout=0.01).run(stalled(), sink)

        assert state == RelayState.ERRORED
        assert sink.fragments == [b"a"]
        assert "Stream stalled" in str(sink.error)


class TestRelayStates:
    """Tests for state transitions."""

    @pytest.mark.asyncio
    async def test_idle_until_first_event(self):
        observed = []
        stream_relay = StreamRelay()

        async def upstream():
            observed.append(stream_relay.state)
            yield StreamEvent.delta("x")
            observed.append(stream_relay.state)

        await stream_relay.run(upstream(), RecordingSink())

        assert observed == [RelayState.IDLE, RelayState.STREAMING]
        assert stream_relay.state == RelayState.CLOSED


class TestChannelSink:
    """Tests for the single-slot channel."""

    @pytest.mark.asyncio
    async def test_send_blocks_until_consumed(self):
        sink = ChannelSink()
        await sink.send(b"first")

        second = asyncio.ensure_future(sink.send(b"second"))
        await asyncio.sleep(0)
        assert not second.done()

        received = sink.__aiter__()
        assert await received.__anext__() == b"first"
        await asyncio.wait_for(second, timeout=1)
        assert await received.__anext__() == b"second"

    @pytest.mark.asyncio
    async def test_fail_raises_in_consumer(self):
        sink = ChannelSink()
        upstream = events(StreamEvent.delta("a"), fault())
        task = asyncio.ensure_future(StreamRelay().run(upstream, sink))

        received = []
        with pytest.raises(CollaboratorError):
            async for fragment in sink:
                received.append(fragment)

        assert received == [b"a"]
        assert await task == RelayState.ERRORED

    @pytest.mark.asyncio
    async def test_slow_consumer_slows_relay(self):
        """The relay never runs more than one fragment ahead of the consumer."""
        sink = ChannelSink()
        produced = []

        async def upstream():
            for text in ("a", "b", "c", "d"):
                produced.append(text)
                yield StreamEvent.delta(text)

        task = asyncio.ensure_future(StreamRelay().run(upstream(), sink))
        for _ in range(5):
            await asyncio.sleep(0)

        # One fragment in the slot, one waiting in send
        assert len(produced) <= 2

        received = [f async for f in sink]
        await task
        assert received == [b"a", b"b", b"c", b"d"]


class TestPrimedStream:
    """Tests for establishing a stream."""

    @pytest.mark.asyncio
    async def test_replays_first_event(self):
        primed = await PrimedStream.open(events(StreamEvent.delta("a"), StreamEvent.delta("b")))
        assert [e.text async for e in primed] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_error_on_first_event_raises_on_open(self):
        with pytest.raises(CollaboratorError):
            await PrimedStream.open(events(fault()))

    @pytest.mark.asyncio
    async def test_empty_stream(self):
        primed = await PrimedStream.open(events())
        assert [e async for e in primed] == []


class TestRelayToBody:
    """Tests for the response body iterator."""

    @pytest.mark.asyncio
    async def test_yields_fragments(self):
        body = relay_to_body(events(StreamEvent.delta("Hel"), StreamEvent.delta("lo")))
        assert b"".join([chunk async for chunk in body]) == b"Hello"

    @pytest.mark.asyncio
    async def test_early_close_cancels_relay(self):
        async def endless():
            while True:
                yield StreamEvent.delta("x")

        stream_relay = StreamRelay()
        body = relay_to_body(endless(), stream_relay)
        assert await body.__anext__() == b"x"
        await body.aclose()

        # Cancelled mid-flight, so it never reached a terminal state
        assert stream_relay.state == RelayState.STREAMING
