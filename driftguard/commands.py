"""
Commands consumed by DriftController and the effects it returns.

Commands are host events, extension messages and the two periodic ticks.
Effects describe what the runtime must do afterwards; the controller never
performs I/O itself.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .inference.signal_evaluator import ContentSignals

IDLE_STATES = ("active", "idle", "locked")


# ── Host events ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TabActivated:
    tab_id: int
    url: Optional[str] = None


@dataclass(frozen=True)
class TabUpdated:
    tab_id: int
    url: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class TabRemoved:
    tab_id: int


@dataclass(frozen=True)
class IdleStateChanged:
    state: str          # active | idle | locked


# ── Extension messages ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ContentSignalsReceived:
    signals: ContentSignals
    tab_id: Optional[int] = None


@dataclass(frozen=True)
class ResetSessionStarted:
    pass


@dataclass(frozen=True)
class SetMode:
    mode: str


@dataclass(frozen=True)
class SetEnabled:
    enabled: bool


@dataclass(frozen=True)
class UpdateCustomDomains:
    productive: Optional[List[str]] = None
    distraction: Optional[List[str]] = None


@dataclass(frozen=True)
class GetMetrics:
    pass


@dataclass(frozen=True)
class CloseTab:
    tab_id: Optional[int] = None


# ── Periodic ticks ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScoringTick:
    pass


@dataclass(frozen=True)
class DecayTick:
    pass


Command = Union[
    TabActivated, TabUpdated, TabRemoved, IdleStateChanged,
    ContentSignalsReceived, ResetSessionStarted, SetMode, SetEnabled,
    UpdateCustomDomains, GetMetrics, CloseTab, ScoringTick, DecayTick,
]


# ── Effects ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PersistState:
    """Write these keys to the durable store."""
    patch: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class TriggerIntervention:
    tab_id: Optional[int]
    mode: str
    url: Optional[str] = None
    reason: str = ""


@dataclass(frozen=True)
class ClearInterventions:
    tab_id: Optional[int]
    url: Optional[str] = None


@dataclass(frozen=True)
class CloseTabRequest:
    tab_id: int


@dataclass(frozen=True)
class BroadcastMetrics:
    snapshot: Dict[str, Any]


Effect = Union[PersistState, TriggerIntervention, ClearInterventions, CloseTabRequest, BroadcastMetrics]
