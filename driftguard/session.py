"""
Session state: the single mutable aggregate owned by DriftController.

Two tiers:

  DurableState    survives process restart; loaded from and written to the
                  state store (enabled, mode, stats, custom domain lists).
  TransientState  rebuilt from zero on every start, on disable and on
                  re-enable (sliding windows, idle tracking, confirmation
                  history, dwell timer, tab bookkeeping, distraction flag).

Nothing in TransientState is ever persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .inference.activity_classifier import Classification
from .inference.domain_classifier import DomainLists, normalize_hosts
from .inference.signal_evaluator import ContentSignals, SignalEvaluation
from .inference.time_window import TimeWindow
from .modes import DEFAULT_MODE, is_known_mode
from .router.confirmation import ConfirmationWindow
from .router.dwell import DwellTracker


def day_stamp(now: float) -> str:
    """Local calendar day of *now* as YYYY-MM-DD."""
    return datetime.fromtimestamp(now).date().isoformat()


# ---------------------------------------------------------------------------
# Durable tier
# ---------------------------------------------------------------------------

@dataclass
class Stats:
    date: str
    distractions_detected: int = 0
    reset_sessions: int = 0
    total_idle_seconds: int = 0

    @classmethod
    def fresh(cls, date: str) -> "Stats":
        return cls(date=date)

    @classmethod
    def from_store(cls, raw: Any, today: str) -> "Stats":
        """Stored stats for *today*, or fresh ones when missing, malformed or stale."""
        if not isinstance(raw, dict) or raw.get("date") != today:
            return cls.fresh(today)
        try:
            return cls(
                date=today,
                distractions_detected=int(raw.get("distractionsDetected", 0)),
                reset_sessions=int(raw.get("resetSessions", 0)),
                total_idle_seconds=int(raw.get("totalIdleSeconds", 0)),
            )
        except (TypeError, ValueError):
            return cls.fresh(today)

    def to_store(self) -> Dict[str, Any]:
        return {
            "date": self.date,
            "distractionsDetected": self.distractions_detected,
            "resetSessions": self.reset_sessions,
            "totalIdleSeconds": self.total_idle_seconds,
        }


@dataclass
class DurableState:
    enabled: bool = True
    mode: str = DEFAULT_MODE
    stats: Stats = field(default_factory=lambda: Stats.fresh(date.today().isoformat()))
    domains: DomainLists = field(default_factory=DomainLists)

    @classmethod
    def from_store(cls, stored: Dict[str, Any], now: float) -> "DurableState":
        enabled = stored.get("enabled", True)
        mode = stored.get("focusMode", DEFAULT_MODE)
        domains = DomainLists()
        domains.set_custom(
            productive=_host_list(stored.get("customProductive")),
            distraction=_host_list(stored.get("customDistraction")),
        )
        return cls(
            enabled=enabled if isinstance(enabled, bool) else True,
            mode=mode if isinstance(mode, str) and is_known_mode(mode) else DEFAULT_MODE,
            stats=Stats.from_store(stored.get("stats"), day_stamp(now)),
            domains=domains,
        )

    def custom_domains_patch(self) -> Dict[str, List[str]]:
        return {
            "customProductive": sorted(self.domains.custom_productive),
            "customDistraction": sorted(self.domains.custom_distraction),
        }


def _host_list(raw: Any) -> List[str]:
    if not isinstance(raw, list):
        return []
    return sorted(normalize_hosts(h for h in raw if isinstance(h, str)))


# ---------------------------------------------------------------------------
# Transient tier
# ---------------------------------------------------------------------------

@dataclass
class TransientState:
    tab_switches: TimeWindow
    window: ConfirmationWindow
    dwell: DwellTracker
    last_decay: float
    is_idle: bool = False
    idle_start: Optional[float] = None
    score: float = 0.0
    content: ContentSignals = field(default_factory=ContentSignals)
    distraction_active: bool = False
    active_tab_id: Optional[int] = None
    distraction_tab_id: Optional[int] = None
    tab_urls: Dict[int, str] = field(default_factory=dict)
    last_evaluation: SignalEvaluation = field(default_factory=SignalEvaluation)
    last_classification: Optional[Classification] = None

    @classmethod
    def cold(
        cls,
        now: float,
        switch_window_s: float = 60.0,
        confirmation_cycles: int = 2,
        dwell_threshold_s: float = 30.0,
    ) -> "TransientState":
        return cls(
            tab_switches=TimeWindow(switch_window_s),
            window=ConfirmationWindow(confirmation_cycles),
            dwell=DwellTracker(dwell_threshold_s),
            last_decay=now,
        )


@dataclass
class SessionState:
    durable: DurableState
    transient: TransientState
