"""
Focus modes: per-mode signal thresholds.

driftSignals    : how many signals must be active for a cycle to read as drift
recoverySignals : kept as configuration only; the confirmation window decides
                  recovery. Must stay strictly below driftSignals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

DEFAULT_MODE = "deep-work"


@dataclass(frozen=True)
class ModeThresholds:
    idle_secs: float
    tab_switch_per_min: int
    drift_signals: int
    recovery_signals: int


MODE_THRESHOLDS: Dict[str, ModeThresholds] = {
    "deep-work": ModeThresholds(idle_secs=15, tab_switch_per_min=2, drift_signals=2, recovery_signals=0),
    "research":  ModeThresholds(idle_secs=45, tab_switch_per_min=8, drift_signals=2, recovery_signals=0),
    "casual":    ModeThresholds(idle_secs=90, tab_switch_per_min=12, drift_signals=2, recovery_signals=0),
}


def validate_thresholds(table: Dict[str, ModeThresholds]) -> None:
    """Raise ValueError if any mode breaks the recovery < drift invariant."""
    for name, t in table.items():
        if t.recovery_signals >= t.drift_signals:
            raise ValueError(
                f"mode {name!r}: recovery_signals ({t.recovery_signals}) "
                f"must be less than drift_signals ({t.drift_signals})"
            )
        if t.drift_signals < 1:
            raise ValueError(f"mode {name!r}: drift_signals must be at least 1")


def is_known_mode(mode: str) -> bool:
    return mode in MODE_THRESHOLDS


def get_thresholds(mode: str) -> ModeThresholds:
    """Thresholds for *mode*; unknown names fall back to deep-work."""
    return MODE_THRESHOLDS.get(mode, MODE_THRESHOLDS[DEFAULT_MODE])


validate_thresholds(MODE_THRESHOLDS)
