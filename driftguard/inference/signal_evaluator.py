"""
Signal Evaluator: turns raw telemetry plus mode thresholds into the four
boolean distraction signals and a bounded display score.

The display score is cosmetic: it feeds the metrics stream only and never
influences classification or hysteresis.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict

from ..modes import ModeThresholds

if TYPE_CHECKING:
    from ..session import TransientState

BACKSPACE_RATIO_THRESHOLD = 0.25
MOUSE_JITTER_THRESHOLD = 5.0
MAX_SCORE = 10.0

# Display weights per active signal
SCORE_WEIGHTS: Dict[str, int] = {
    "idle": 2,
    "tab_switch": 3,
    "backspace": 2,
    "jitter": 3,
}


@dataclass
class ContentSignals:
    """Latest snapshot reported by the page-level signal collector."""
    backspace_ratio: float = 0.0
    mouse_jitter: float = 0.0
    scroll_velocity: float = 0.0          # px / s
    is_typing_recently: bool = False
    is_scrolling_recently: bool = False


@dataclass(frozen=True)
class RawSignals:
    idle: bool = False
    tab_switch: bool = False
    backspace: bool = False
    jitter: bool = False

    def as_dict(self) -> Dict[str, bool]:
        return {
            "idle": self.idle,
            "tab_switch": self.tab_switch,
            "backspace": self.backspace,
            "jitter": self.jitter,
        }

    def active_count(self) -> int:
        return sum(1 for v in self.as_dict().values() if v)


@dataclass
class SignalEvaluation:
    signals: RawSignals = field(default_factory=RawSignals)
    recent_switches: int = 0
    idle_secs: float = 0.0
    score: float = 0.0


def display_score(signals: RawSignals) -> float:
    raw = sum(SCORE_WEIGHTS[name] for name, active in signals.as_dict().items() if active)
    return float(min(MAX_SCORE, raw))


def evaluate_signals(
    session: "TransientState",
    thresholds: ModeThresholds,
    now: float,
) -> SignalEvaluation:
    cutoff = now - session.tab_switches.max_age_s
    recent_switches = session.tab_switches.count_since(cutoff)

    idle_secs = 0.0
    if session.is_idle and session.idle_start is not None:
        idle_secs = max(0.0, now - session.idle_start)

    content = session.content
    signals = RawSignals(
        idle=idle_secs >= thresholds.idle_secs,
        tab_switch=recent_switches >= thresholds.tab_switch_per_min,
        backspace=content.backspace_ratio > BACKSPACE_RATIO_THRESHOLD,
        jitter=content.mouse_jitter > MOUSE_JITTER_THRESHOLD,
    )
    return SignalEvaluation(
        signals=signals,
        recent_switches=recent_switches,
        idle_secs=idle_secs,
        score=display_score(signals),
    )
