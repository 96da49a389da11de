"""
Tests for the broadcast hub: fan-out, ordering, lag reporting and shutdown.
"""

import asyncio
import gc
import threading

import pytest

from sync_bridge.events import broadcaster
from sync_bridge.events.hub import BroadcastHub, HubClosed, Lagged
from sync_bridge.events.models import LocaleChanged, PatternsChanged, ProductChanged, Progress
from sync_bridge.schemas.progress import ProgressSnapshot
from sync_bridge.schemas.software import PatternStatus


def _locale(n: int) -> LocaleChanged:
    return LocaleChanged(locale=f"locale_{n}")


class TestFanOut:

    @pytest.mark.asyncio
    async def test_two_subscribers_read_same_order(self):
        hub = BroadcastHub()
        a = hub.subscribe()
        b = hub.subscribe()
        events = [
            LocaleChanged(locale="de_DE"),
            Progress(snapshot=ProgressSnapshot(current_title="step", current_step=1, max_steps=3)),
            ProductChanged(id="leap"),
        ]

        for event in events:
            assert hub.publish(event) == 2

        assert [await a.recv() for _ in events] == events
        assert [await b.recv() for _ in events] == events

    @pytest.mark.asyncio
    async def test_each_subscriber_receives_exactly_once(self):
        hub = BroadcastHub()
        subs = [hub.subscribe() for _ in range(5)]

        hub.publish(ProductChanged(id="tumbleweed"))

        for sub in subs:
            assert await sub.recv() == ProductChanged(id="tumbleweed")
            assert sub.try_recv() is None

    @pytest.mark.asyncio
    async def test_late_subscriber_misses_history(self):
        hub = BroadcastHub()
        early = hub.subscribe()
        hub.publish(_locale(1))
        late = hub.subscribe()
        hub.publish(_locale(2))

        assert await early.recv() == _locale(1)
        assert await early.recv() == _locale(2)
        assert await late.recv() == _locale(2)
        assert late.try_recv() is None

    @pytest.mark.asyncio
    async def test_publish_without_subscribers(self):
        hub = BroadcastHub()

        assert hub.publish(_locale(1)) == 0

    @pytest.mark.asyncio
    async def test_subscribers_get_independent_copies(self):
        hub = BroadcastHub()
        a = hub.subscribe()
        b = hub.subscribe()
        event = PatternsChanged(patterns={"gnome": PatternStatus.AVAILABLE})

        hub.publish(event)
        got_a = await a.recv()
        got_b = await b.recv()
        got_a.patterns["kde"] = PatternStatus.USER_SELECTED

        assert got_b.patterns == {"gnome": PatternStatus.AVAILABLE}
        assert event.patterns == {"gnome": PatternStatus.AVAILABLE}

    @pytest.mark.asyncio
    async def test_waiting_reader_is_woken(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        reader = asyncio.create_task(sub.recv())
        await asyncio.sleep(0)
        assert not reader.done()

        hub.publish(_locale(1))

        assert await asyncio.wait_for(reader, timeout=1) == _locale(1)


class TestLag:

    @pytest.mark.asyncio
    async def test_overflow_reports_gap_once(self):
        hub = BroadcastHub(capacity=2)
        slow = hub.subscribe()
        fast = hub.subscribe()

        for n in range(5):
            hub.publish(_locale(n))
            assert await fast.recv() == _locale(n)

        assert await slow.recv() == Lagged(missed=3)
        assert await slow.recv() == _locale(3)
        assert await slow.recv() == _locale(4)
        assert slow.try_recv() is None

    @pytest.mark.asyncio
    async def test_second_overflow_reports_new_gap(self):
        hub = BroadcastHub(capacity=1)
        sub = hub.subscribe()

        hub.publish(_locale(0))
        hub.publish(_locale(1))
        assert await sub.recv() == Lagged(missed=1)
        assert await sub.recv() == _locale(1)

        hub.publish(_locale(2))
        hub.publish(_locale(3))
        hub.publish(_locale(4))
        assert await sub.recv() == Lagged(missed=2)
        assert await sub.recv() == _locale(4)

    @pytest.mark.asyncio
    async def test_per_subscription_capacity(self):
        hub = BroadcastHub(capacity=1)
        roomy = hub.subscribe(capacity=10)

        for n in range(5):
            hub.publish(_locale(n))

        assert [await roomy.recv() for _ in range(5)] == [_locale(n) for n in range(5)]

    @pytest.mark.asyncio
    async def test_publish_never_blocks_on_full_subscriber(self):
        hub = BroadcastHub(capacity=1)
        sub = hub.subscribe()

        for n in range(100):
            hub.publish(_locale(n))

        assert sub.pending == 1

    def test_capacity_must_be_positive(self):
        with pytest.raises(ValueError):
            BroadcastHub(capacity=0)

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_subscription_capacity_must_be_positive(self, capacity):
        hub = BroadcastHub()

        with pytest.raises(ValueError):
            hub.subscribe(capacity=capacity)

        assert hub.subscriber_count == 0


class TestShutdown:

    @pytest.mark.asyncio
    async def test_close_unblocks_pending_read(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        reader = asyncio.create_task(sub.recv())
        await asyncio.sleep(0)

        hub.close()

        with pytest.raises(HubClosed):
            await asyncio.wait_for(reader, timeout=1)

    @pytest.mark.asyncio
    async def test_pending_events_drain_before_closure(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        hub.publish(_locale(1))

        hub.close()

        assert await sub.recv() == _locale(1)
        with pytest.raises(HubClosed):
            await sub.recv()

    @pytest.mark.asyncio
    async def test_iteration_stops_on_close(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        hub.publish(_locale(1))
        hub.publish(_locale(2))
        hub.close()

        received = [item async for item in sub]

        assert received == [_locale(1), _locale(2)]

    @pytest.mark.asyncio
    async def test_publish_after_close_is_dropped(self):
        hub = BroadcastHub()
        hub.close()
        hub.close()

        assert hub.closed
        assert hub.publish(_locale(1)) == 0
        with pytest.raises(HubClosed):
            await hub.subscribe().recv()


class TestSubscriptionLifetime:

    @pytest.mark.asyncio
    async def test_close_releases_subscription(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        other = hub.subscribe()
        hub.publish(_locale(1))

        sub.close()
        hub.publish(_locale(2))

        assert hub.subscriber_count == 1
        assert sub.pending == 0
        with pytest.raises(HubClosed):
            await sub.recv()
        assert await other.recv() == _locale(1)
        assert await other.recv() == _locale(2)

    @pytest.mark.asyncio
    async def test_context_manager_releases(self):
        hub = BroadcastHub()

        async with hub.subscribe() as sub:
            assert hub.subscriber_count == 1

        assert sub.closed
        assert hub.subscriber_count == 0

    def test_dropped_handle_is_released(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        assert hub.subscriber_count == 1

        del sub
        gc.collect()

        assert hub.subscriber_count == 0

    @pytest.mark.asyncio
    async def test_cancelled_reader_does_not_affect_others(self):
        hub = BroadcastHub()
        abandoned = hub.subscribe()
        other = hub.subscribe()
        reader = asyncio.create_task(abandoned.recv())
        await asyncio.sleep(0)

        reader.cancel()
        with pytest.raises(asyncio.CancelledError):
            await reader
        abandoned.close()

        assert hub.publish(_locale(1)) == 1
        assert await other.recv() == _locale(1)


class TestThreadedProducer:

    @pytest.mark.asyncio
    async def test_publish_from_thread(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        loop = asyncio.get_running_loop()

        producer = threading.Thread(
            target=lambda: [hub.publish_threadsafe(loop, _locale(n)) for n in range(3)]
        )
        producer.start()
        producer.join()

        received = [await asyncio.wait_for(sub.recv(), timeout=1) for _ in range(3)]
        assert received == [_locale(n) for n in range(3)]


class TestBroadcaster:

    def test_publish_without_hub_is_noop(self):
        broadcaster.set_hub(None)

        assert broadcaster.publish_event(_locale(1)) == 0

    @pytest.mark.asyncio
    async def test_publish_through_registered_hub(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        broadcaster.set_hub(hub)
        try:
            assert broadcaster.get_hub() is hub
            assert broadcaster.publish_event(ProductChanged(id="leap")) == 1
            assert await sub.recv() == ProductChanged(id="leap")
        finally:
            broadcaster.set_hub(None)

    @pytest.mark.asyncio
    async def test_publish_from_worker_thread_wakes_reader(self):
        hub = BroadcastHub()
        sub = hub.subscribe()
        broadcaster.set_hub(hub)
        try:
            reader = asyncio.create_task(sub.recv())
            await asyncio.sleep(0)
            results = []

            worker = threading.Thread(target=lambda: results.append(broadcaster.publish_event(_locale(1))))
            worker.start()
            worker.join()

            assert results == [None]
            assert await asyncio.wait_for(reader, timeout=1) == _locale(1)
        finally:
            broadcaster.set_hub(None)
