"""Tests for the ordered activity rules."""

from driftguard.inference.activity_classifier import (
    FALLBACK_RULE,
    RULES,
    ActivityContext,
    ActivityLabel,
    classify_activity,
    suppress_signals,
)
from driftguard.inference.domain_classifier import DomainCategory
from driftguard.inference.signal_evaluator import RawSignals
from driftguard.modes import get_thresholds

DEEP = get_thresholds("deep-work")
UNKNOWN = DomainCategory.UNKNOWN


def _classify(signals=RawSignals(), context=ActivityContext(), category=UNKNOWN):
    return classify_activity(signals, context, DEEP, category)


class TestRuleOrder:
    def test_rule_names_in_priority_order(self):
        assert [r.name for r in RULES] == [
            "distraction_site", "safe_zone", "deep_focus", "reading",
            "working", "drift", "uncertain",
        ]

    def test_distraction_site_wins_over_typing(self):
        c = _classify(context=ActivityContext(is_typing_recently=True), category=DomainCategory.DISTRACTION)
        assert c.label == ActivityLabel.DISTRACTED
        assert c.rule == "distraction_site"

    def test_safe_zone_wins_over_signals(self):
        c = _classify(RawSignals(idle=True, tab_switch=True, jitter=True), category=DomainCategory.PRODUCTIVE)
        assert c.label == ActivityLabel.FOCUSED
        assert c.rule == "safe_zone"

    def test_deep_focus(self):
        c = _classify(context=ActivityContext(is_typing_recently=True))
        assert c.label == ActivityLabel.DEEP_FOCUS

    def test_reading_needs_slow_scroll_and_no_switching(self):
        slow = ActivityContext(is_scrolling_recently=True, scroll_velocity=80.0)
        assert _classify(context=slow).label == ActivityLabel.READING
        assert _classify(RawSignals(tab_switch=True), context=slow).label == ActivityLabel.UNCERTAIN

    def test_working_is_typing_with_corrections(self):
        c = _classify(RawSignals(backspace=True), ActivityContext(is_typing_recently=True))
        assert c.label == ActivityLabel.WORKING

    def test_drift_needs_two_signals(self):
        c = _classify(RawSignals(idle=True, tab_switch=True))
        assert c.label == ActivityLabel.DISTRACTED
        assert c.rule == "drift"
        assert c.active_count == 2

    def test_single_signal_is_uncertain(self):
        assert _classify(RawSignals(jitter=True)).label == ActivityLabel.UNCERTAIN

    def test_nothing_is_focused_fallback(self):
        c = _classify()
        assert c.label == ActivityLabel.FOCUSED
        assert c.rule == FALLBACK_RULE


class TestSuppression:
    def test_typing_clears_idle_and_jitter(self):
        s = suppress_signals(RawSignals(idle=True, jitter=True, tab_switch=True), ActivityContext(is_typing_recently=True))
        assert s == RawSignals(tab_switch=True)

    def test_slow_scroll_clears_idle(self):
        s = suppress_signals(RawSignals(idle=True), ActivityContext(is_scrolling_recently=True, scroll_velocity=100.0))
        assert not s.idle

    def test_fast_scroll_keeps_idle(self):
        s = suppress_signals(RawSignals(idle=True), ActivityContext(is_scrolling_recently=True, scroll_velocity=400.0))
        assert s.idle

    def test_typing_suppression_prevents_drift(self):
        # idle + jitter would be drift, but typing explains both away
        c = _classify(RawSignals(idle=True, jitter=True), ActivityContext(is_typing_recently=True))
        assert c.label == ActivityLabel.DEEP_FOCUS
        assert c.active_count == 0


class TestAimlessBrowsing:
    def test_fast_scroll_with_switching_counts_as_extra_signal(self):
        ctx = ActivityContext(is_scrolling_recently=True, scroll_velocity=900.0)
        c = _classify(RawSignals(tab_switch=True), ctx)
        assert c.active_count == 2
        assert c.label == ActivityLabel.DISTRACTED

    def test_fast_scroll_alone_is_not_a_signal(self):
        ctx = ActivityContext(is_scrolling_recently=True, scroll_velocity=900.0)
        assert _classify(context=ctx).active_count == 0

    def test_deterministic(self):
        args = (RawSignals(idle=True, backspace=True), ActivityContext(scroll_velocity=700.0))
        assert _classify(*args) == _classify(*args)
