"""
Tests for EventChannel: FIFO delivery, cancellation and reset.
"""

import asyncio

import pytest

from hubgen.core.errors import ChannelClosed, OperationCanceled
from hubgen.runtime import CancellationToken
from hubgen.testing import EventChannel


class TestDelivery:
    """publish / wait_next ordering."""

    @pytest.mark.asyncio
    async def test_fifo_across_calls(self):
        channel = EventChannel()
        for value in range(5):
            channel.publish(value)

        assert channel.pending == 5
        assert [await channel.wait_next() for _ in range(5)] == [0, 1, 2, 3, 4]
        assert len(channel) == 0

    @pytest.mark.asyncio
    async def test_wait_then_publish(self):
        channel = EventChannel()
        waiter = asyncio.create_task(channel.wait_next())
        await asyncio.sleep(0)
        assert not waiter.done()

        channel.publish("alice")

        assert await asyncio.wait_for(waiter, 1) == "alice"
        assert channel.pending == 0

    @pytest.mark.asyncio
    async def test_waiters_served_in_order(self):
        channel = EventChannel()
        first = asyncio.create_task(channel.wait_next())
        second = asyncio.create_task(channel.wait_next())
        await asyncio.sleep(0)

        channel.publish(1)
        channel.publish(2)

        assert await first == 1
        assert await second == 2

    @pytest.mark.asyncio
    async def test_concurrent_producers(self):
        channel = EventChannel()

        async def produce(prefix):
            for i in range(10):
                channel.publish((prefix, i))
                await asyncio.sleep(0)

        await asyncio.gather(produce("a"), produce("b"))
        received = [await channel.wait_next() for _ in range(20)]

        assert [i for p, i in received if p == "a"] == list(range(10))
        assert [i for p, i in received if p == "b"] == list(range(10))


class TestCancellation:
    """wait_next with a cancellation token."""

    @pytest.mark.asyncio
    async def test_already_cancelled_fails_immediately(self):
        channel = EventChannel()
        channel.publish("kept")

        with pytest.raises(OperationCanceled):
            await channel.wait_next(CancellationToken.canceled())

        assert channel.pending == 1

    @pytest.mark.asyncio
    async def test_cancel_while_waiting(self):
        channel = EventChannel()
        token = CancellationToken()
        waiter = asyncio.create_task(channel.wait_next(token))
        await asyncio.sleep(0)

        token.cancel()

        with pytest.raises(OperationCanceled):
            await asyncio.wait_for(waiter, 1)

    @pytest.mark.asyncio
    async def test_cancellation_consumes_nothing(self):
        channel = EventChannel()
        token = CancellationToken()
        waiter = asyncio.create_task(channel.wait_next(token))
        await asyncio.sleep(0)
        token.cancel()
        with pytest.raises(OperationCanceled):
            await waiter

        channel.publish("next")

        assert channel.pending == 1
        assert await channel.wait_next() == "next"

    @pytest.mark.asyncio
    async def test_cancel_after_timeout(self):
        channel = EventChannel()
        token = CancellationToken()
        token.cancel_after(0.01)
        with pytest.raises(OperationCanceled):
            await asyncio.wait_for(channel.wait_next(token), 1)

    @pytest.mark.asyncio
    async def test_task_cancel_keeps_item_order(self):
        channel = EventChannel()
        waiter = asyncio.create_task(channel.wait_next())
        await asyncio.sleep(0)
        waiter.cancel()
        with pytest.raises(asyncio.CancelledError):
            await waiter

        channel.publish("a")
        assert await channel.wait_next() == "a"


class TestReset:
    """reset() swaps in a fresh queue."""

    @pytest.mark.asyncio
    async def test_reset_discards_buffer(self):
        channel = EventChannel()
        channel.publish(1)
        channel.publish(2)

        channel.reset()
        assert channel.pending == 0

        channel.publish(3)
        assert await channel.wait_next() == 3

    @pytest.mark.asyncio
    async def test_reset_fails_outstanding_waiters(self):
        channel = EventChannel()
        waiter = asyncio.create_task(channel.wait_next())
        await asyncio.sleep(0)

        channel.reset()

        with pytest.raises(ChannelClosed):
            await waiter

    def test_channel_closed_is_cancellation(self):
        assert issubclass(ChannelClosed, OperationCanceled)
