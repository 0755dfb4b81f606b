"""Tests for tab message delivery and metrics fan-out."""

import pytest

from driftguard.telemetry.outbox import (
    MAX_QUEUED_PER_TAB,
    MetricsBroadcaster,
    TabMessenger,
    is_restricted_url,
)


class TestTabMessenger:
    def test_send_and_drain(self):
        m = TabMessenger()
        assert m.send(3, {"type": "DISTRACTION_DETECTED"}, "https://reddit.com")
        assert m.drain(3) == [{"type": "DISTRACTION_DETECTED"}]
        assert m.drain(3) == []

    def test_missing_tab_is_skipped(self):
        assert not TabMessenger().send(None, {"type": "CLEAR_INTERVENTIONS"})

    @pytest.mark.parametrize("url", ["chrome://newtab/", "about:blank", "chrome-extension://abc/popup.html"])
    def test_restricted_pages_are_skipped(self, url):
        assert is_restricted_url(url)
        assert not TabMessenger().send(1, {"type": "CLEAR_INTERVENTIONS"}, url)

    def test_closed_tab_is_skipped_until_reopened(self):
        m = TabMessenger()
        m.mark_closed(4)
        assert not m.send(4, {"type": "CLEAR_INTERVENTIONS"})
        m.mark_open(4)
        assert m.send(4, {"type": "CLEAR_INTERVENTIONS"})

    def test_queue_is_bounded(self):
        m = TabMessenger()
        for i in range(MAX_QUEUED_PER_TAB + 5):
            m.send(1, {"type": "X", "n": i})
        drained = m.drain(1)
        assert len(drained) == MAX_QUEUED_PER_TAB
        assert drained[-1]["n"] == MAX_QUEUED_PER_TAB + 4

    def test_close_requests_deduplicated(self):
        m = TabMessenger()
        m.request_close(7)
        m.request_close(7)
        m.mark_closed(8)
        m.request_close(8)
        assert m.drain_close_requests() == [7]
        assert m.drain_close_requests() == []


class TestMetricsBroadcaster:
    async def test_new_subscriber_gets_latest(self):
        b = MetricsBroadcaster()
        b.publish({"score": 1.0})
        q = b.subscribe()
        assert q.get_nowait() == {"score": 1.0}

    async def test_slow_subscriber_keeps_newest(self):
        b = MetricsBroadcaster(queue_size=2)
        q = b.subscribe()
        for i in range(4):
            b.publish({"n": i})
        assert [q.get_nowait()["n"], q.get_nowait()["n"]] == [2, 3]

    async def test_unsubscribe(self):
        b = MetricsBroadcaster()
        q = b.subscribe()
        b.unsubscribe(q)
        assert b.subscriber_count == 0
