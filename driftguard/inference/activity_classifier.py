"""
Activity Classifier: combines the raw signals, page context and domain
category into a single activity label.

Labels:
  DEEP_FOCUS : typing steadily, no switching, no heavy correcting
  READING    : slow scrolling, no switching
  WORKING    : typing with a lot of corrections
  DISTRACTED : distraction site, or enough signals active at once
  UNCERTAIN  : exactly one signal active
  FOCUSED    : safe-zone site, or nothing notable going on

Pure and deterministic: the same inputs always produce the same label.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List

from ..modes import ModeThresholds
from .domain_classifier import DomainCategory
from .signal_evaluator import RawSignals

READING_MAX_VELOCITY = 150.0     # px/s, below this a scroll reads as reading
AIMLESS_MIN_VELOCITY = 600.0     # px/s, above this, with switching, reads as browsing


class ActivityLabel(str, Enum):
    DEEP_FOCUS = "DEEP_FOCUS"
    READING = "READING"
    WORKING = "WORKING"
    DISTRACTED = "DISTRACTED"
    UNCERTAIN = "UNCERTAIN"
    FOCUSED = "FOCUSED"


@dataclass(frozen=True)
class ActivityContext:
    is_typing_recently: bool = False
    is_scrolling_recently: bool = False
    scroll_velocity: float = 0.0


@dataclass(frozen=True)
class RuleInput:
    signals: RawSignals              # after context suppression
    context: ActivityContext
    thresholds: ModeThresholds
    category: DomainCategory
    active_count: int


@dataclass(frozen=True)
class ActivityRule:
    name: str
    label: ActivityLabel
    matches: Callable[[RuleInput], bool]


@dataclass(frozen=True)
class Classification:
    label: ActivityLabel
    active_count: int
    rule: str
    signals: RawSignals


def _slow_scroll(ctx: ActivityContext) -> bool:
    return ctx.is_scrolling_recently and ctx.scroll_velocity < READING_MAX_VELOCITY


def suppress_signals(signals: RawSignals, ctx: ActivityContext) -> RawSignals:
    """Clear signals that the page context explains away."""
    if ctx.is_typing_recently:
        signals = replace(signals, idle=False, jitter=False)
    if _slow_scroll(ctx):
        signals = replace(signals, idle=False)
    return signals


# ---------------------------------------------------------------------------
# Rule registry: evaluated top-down, first match wins
# ---------------------------------------------------------------------------

RULES: List[ActivityRule] = [
    ActivityRule(
        "distraction_site", ActivityLabel.DISTRACTED,
        lambda r: r.category == DomainCategory.DISTRACTION,
    ),
    ActivityRule(
        "safe_zone", ActivityLabel.FOCUSED,
        lambda r: r.category == DomainCategory.PRODUCTIVE,
    ),
    ActivityRule(
        "deep_focus", ActivityLabel.DEEP_FOCUS,
        lambda r: (r.context.is_typing_recently
                   and not r.signals.tab_switch
                   and not r.signals.backspace),
    ),
    ActivityRule(
        "reading", ActivityLabel.READING,
        lambda r: _slow_scroll(r.context) and not r.signals.tab_switch,
    ),
    ActivityRule(
        "working", ActivityLabel.WORKING,
        lambda r: r.context.is_typing_recently and r.signals.backspace,
    ),
    ActivityRule(
        "drift", ActivityLabel.DISTRACTED,
        lambda r: r.active_count >= r.thresholds.drift_signals,
    ),
    ActivityRule(
        "uncertain", ActivityLabel.UNCERTAIN,
        lambda r: r.active_count == 1,
    ),
]

FALLBACK_RULE = "fallback"


def classify_activity(
    signals: RawSignals,
    context: ActivityContext,
    thresholds: ModeThresholds,
    category: DomainCategory,
) -> Classification:
    working = suppress_signals(signals, context)
    aimless = context.scroll_velocity > AIMLESS_MIN_VELOCITY and working.tab_switch
    active_count = working.active_count() + (1 if aimless else 0)

    rule_input = RuleInput(
        signals=working,
        context=context,
        thresholds=thresholds,
        category=category,
        active_count=active_count,
    )
    for rule in RULES:
        if rule.matches(rule_input):
            return Classification(rule.label, active_count, rule.name, working)
    return Classification(ActivityLabel.FOCUSED, active_count, FALLBACK_RULE, working)
