"""Tests for the sliding time window and the four-signal evaluator."""

import pytest

from driftguard.inference.signal_evaluator import (
    ContentSignals,
    RawSignals,
    display_score,
    evaluate_signals,
)
from driftguard.inference.time_window import TimeWindow
from driftguard.modes import get_thresholds
from driftguard.session import TransientState

T0 = 1_700_000_000.0


def _session(**content) -> TransientState:
    session = TransientState.cold(T0)
    session.content = ContentSignals(**content)
    return session


class TestTimeWindow:
    def test_append_evicts_entries_at_the_cutoff(self):
        w = TimeWindow(60.0)
        for ts in (0.0, 30.0, 60.0):
            w.append(ts)
        assert [ts for ts, _ in w] == [30.0, 60.0]

    def test_prune_returns_number_dropped(self):
        w = TimeWindow(10.0)
        w.append(1.0)
        w.append(2.0)
        assert w.prune(12.5) == 2
        assert len(w) == 0

    def test_count_since_is_strict(self):
        w = TimeWindow(60.0)
        w.append(10.0)
        w.append(20.0)
        assert w.count_since(10.0) == 1

    def test_first_last_and_items(self):
        w = TimeWindow(60.0)
        assert w.first() is None and w.last() is None
        w.append(1.0, "a")
        w.append(2.0, "b")
        assert w.first() == (1.0, "a")
        assert w.last() == (2.0, "b")
        assert w.items_since(1.0) == [(2.0, "b")]


class TestEvaluateSignals:
    thresholds = get_thresholds("deep-work")

    def test_quiet_session_has_no_signals(self):
        ev = evaluate_signals(_session(), self.thresholds, T0)
        assert ev.signals == RawSignals()
        assert ev.score == 0.0

    def test_tab_switch_signal_counts_last_minute_only(self):
        session = _session()
        session.tab_switches.append(T0 - 90)
        session.tab_switches.append(T0 - 50)
        session.tab_switches.append(T0 - 10)
        ev = evaluate_signals(session, self.thresholds, T0)
        assert ev.recent_switches == 2
        assert ev.signals.tab_switch

    def test_idle_signal_at_threshold(self):
        session = _session()
        session.is_idle = True
        session.idle_start = T0 - 15
        ev = evaluate_signals(session, self.thresholds, T0)
        assert ev.signals.idle
        assert ev.idle_secs == pytest.approx(15.0)

    def test_idle_below_threshold(self):
        session = _session()
        session.is_idle = True
        session.idle_start = T0 - 14
        assert not evaluate_signals(session, self.thresholds, T0).signals.idle

    def test_research_mode_tolerates_more_idle(self):
        session = _session()
        session.is_idle = True
        session.idle_start = T0 - 30
        assert not evaluate_signals(session, get_thresholds("research"), T0).signals.idle

    @pytest.mark.parametrize("ratio,expected", [(0.25, False), (0.3, True)])
    def test_backspace_threshold_is_strict(self, ratio, expected):
        ev = evaluate_signals(_session(backspace_ratio=ratio), self.thresholds, T0)
        assert ev.signals.backspace is expected

    @pytest.mark.parametrize("jitter,expected", [(5.0, False), (5.1, True)])
    def test_jitter_threshold_is_strict(self, jitter, expected):
        ev = evaluate_signals(_session(mouse_jitter=jitter), self.thresholds, T0)
        assert ev.signals.jitter is expected


class TestDisplayScore:
    def test_weights(self):
        assert display_score(RawSignals(idle=True, tab_switch=True)) == 5.0
        assert display_score(RawSignals(backspace=True)) == 2.0

    def test_capped_at_ten(self):
        assert display_score(RawSignals(True, True, True, True)) == 10.0

    def test_active_count(self):
        assert RawSignals(idle=True, jitter=True).active_count() == 2
