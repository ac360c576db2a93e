"""Unit tests for reactive state channels."""

import asyncio

import pytest

from agentic_notes.events.observable import StateChannel, combine


class TestStateChannel:
    """Tests for value delivery."""

    def test_subscribe_replays_current_value(self):
        channel = StateChannel(1)
        received = []

        channel.subscribe(received.append)

        assert received == [1]

    def test_subscribe_without_replay(self):
        channel = StateChannel(1)
        received = []

        channel.subscribe(received.append, replay=False)
        channel.set(2)

        assert received == [2]

    def test_delivers_every_change_in_order(self):
        channel = StateChannel(0)
        received = []
        channel.subscribe(received.append, replay=False)

        for value in (1, 2, 3):
            channel.set(value)

        assert received == [1, 2, 3]

    def test_equal_value_is_not_delivered(self):
        channel = StateChannel("a")
        received = []
        channel.subscribe(received.append, replay=False)

        changed = channel.set("a")

        assert changed is False
        assert received == []

    def test_update_applies_function(self):
        channel = StateChannel(frozenset({"x"}))

        result = channel.update(lambda ids: ids | {"y"})

        assert result == frozenset({"x", "y"})
        assert channel.value == result

    def test_cancelled_subscription_stops_delivery(self):
        channel = StateChannel(0)
        received = []
        subscription = channel.subscribe(received.append, replay=False)

        subscription.cancel()
        subscription.cancel()
        channel.set(1)

        assert received == []
        assert channel.subscriber_count == 0

    def test_failing_subscriber_does_not_block_others(self):
        channel = StateChannel(0)
        received = []

        def broken(value):
            raise RuntimeError("boom")

        channel.subscribe(broken, replay=False)
        channel.subscribe(received.append, replay=False)
        channel.set(5)

        assert received == [5]
        assert channel.value == 5


class TestDerivedChannels:
    """Tests for map and combine."""

    def test_map_follows_source(self):
        source = StateChannel(frozenset())
        active = source.map(bool)

        source.set(frozenset({"a"}))
        assert active.value is True

        source.set(frozenset())
        assert active.value is False

    def test_combine_recomputes_on_any_source(self):
        numbers = StateChannel((1, 2, 3, 4))
        minimum = StateChannel(0)
        filtered = combine([numbers, minimum], lambda ns, m: tuple(n for n in ns if n > m))
        received = []
        filtered.subscribe(received.append, replay=False)

        minimum.set(2)
        numbers.set((5, 1))

        assert received == [(3, 4), (5,)]
        assert filtered.value == (5,)

    def test_combine_skips_unchanged_results(self):
        numbers = StateChannel((1, 2))
        minimum = StateChannel(5)
        filtered = combine([numbers, minimum], lambda ns, m: tuple(n for n in ns if n > m))
        received = []
        filtered.subscribe(received.append, replay=False)

        minimum.set(6)

        assert received == []


class TestStream:
    """Tests for async iteration."""

    @pytest.mark.asyncio
    async def test_stream_yields_current_then_changes(self):
        channel = StateChannel("a")
        received = []

        async def consume():
            async for value in channel.stream():
                received.append(value)
                if len(received) == 3:
                    break

        consumer = asyncio.create_task(consume())
        await asyncio.sleep(0)
        channel.set("b")
        channel.set("c")
        await asyncio.wait_for(consumer, timeout=1)

        assert received == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_stream_unsubscribes_when_closed(self):
        channel = StateChannel(0)
        stream = channel.stream()

        assert await stream.__anext__() == 0
        assert channel.subscriber_count == 1

        await stream.aclose()

        assert channel.subscriber_count == 0
