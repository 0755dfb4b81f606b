"""
DriftController: owns the SessionState and turns commands into effects.

Usage:
    ctl = DriftController.from_store(store.load())
    effects = ctl.handle(TabActivated(tab_id=7, url="https://youtube.com"))
    effects += ctl.handle(ScoringTick())

Every handler runs to completion without yielding, so each command observes
and leaves a consistent state. Callers that run handlers from several tasks
must serialise access (see runtime.EngineRuntime).
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, replace
from typing import Any, Callable, Dict, List, Optional

from .commands import (
    IDLE_STATES,
    BroadcastMetrics,
    ClearInterventions,
    CloseTab,
    CloseTabRequest,
    Command,
    ContentSignalsReceived,
    DecayTick,
    Effect,
    GetMetrics,
    IdleStateChanged,
    PersistState,
    ResetSessionStarted,
    ScoringTick,
    SetEnabled,
    SetMode,
    TabActivated,
    TabRemoved,
    TabUpdated,
    TriggerIntervention,
    UpdateCustomDomains,
)
from .config import Config, config
from .inference.activity_classifier import ActivityContext, classify_activity
from .inference.domain_classifier import DomainCategory, classify_domain
from .inference.score_decay import decay_score
from .inference.signal_evaluator import evaluate_signals
from .modes import ModeThresholds, get_thresholds, is_known_mode
from .router.hysteresis import GateDecision, HysteresisGate
from .session import DurableState, SessionState, Stats, TransientState, day_stamp

logger = logging.getLogger(__name__)


class DriftController:

    def __init__(
        self,
        durable: Optional[DurableState] = None,
        cfg: Optional[Config] = None,
        now: Optional[float] = None,
    ):
        now = time.time() if now is None else now
        self._cfg = cfg or config
        if durable is None:
            durable = DurableState(stats=Stats.fresh(day_stamp(now)))
        self.state = SessionState(durable=durable, transient=self._cold(now))
        self._gate = HysteresisGate()
        self._handlers: Dict[type, Callable[[Any, float], List[Effect]]] = {
            TabActivated: self._on_tab_activated,
            TabUpdated: self._on_tab_updated,
            TabRemoved: self._on_tab_removed,
            IdleStateChanged: self._on_idle_state,
            ContentSignalsReceived: self._on_content_signals,
            ResetSessionStarted: self._on_reset_session,
            SetMode: self._on_set_mode,
            SetEnabled: self._on_set_enabled,
            UpdateCustomDomains: self._on_update_domains,
            GetMetrics: self._on_get_metrics,
            CloseTab: self._on_close_tab,
            ScoringTick: self._on_scoring_tick,
            DecayTick: self._on_decay_tick,
        }

    @classmethod
    def from_store(
        cls,
        stored: Dict[str, Any],
        cfg: Optional[Config] = None,
        now: Optional[float] = None,
    ) -> "DriftController":
        now = time.time() if now is None else now
        return cls(durable=DurableState.from_store(stored, now), cfg=cfg, now=now)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def handle(self, command: Command, now: Optional[float] = None) -> List[Effect]:
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command: {type(command).__name__}")
        return handler(command, time.time() if now is None else now)

    @property
    def durable(self) -> DurableState:
        return self.state.durable

    @property
    def transient(self) -> TransientState:
        return self.state.transient

    @property
    def thresholds(self) -> ModeThresholds:
        return get_thresholds(self.durable.mode)

    def current_category(self) -> DomainCategory:
        return self.transient.dwell.current or DomainCategory.UNKNOWN

    def snapshot(self, now: Optional[float] = None) -> Dict[str, Any]:
        """Metrics for the popup / dashboard."""
        now = time.time() if now is None else now
        t, d, th = self.transient, self.durable, self.thresholds
        classification = t.last_classification
        recent_switches = t.tab_switches.count_since(now - t.tab_switches.max_age_s)
        idle_secs = now - t.idle_start if t.is_idle and t.idle_start is not None else 0.0
        return {
            "score": round(t.score, 1),
            "is_distracted": t.distraction_active,
            "state": self._gate.state_of(t.distraction_active).value,
            "active_signal_count": classification.active_count if classification else 0,
            "classification": classification.label.value if classification else None,
            "signals": t.last_evaluation.signals.as_dict(),
            "tab_switches": recent_switches,
            "tab_switch_limit": th.tab_switch_per_min,
            "is_idle": t.is_idle,
            "idle_secs": int(max(0.0, idle_secs)),
            "idle_threshold": th.idle_secs,
            "backspace_ratio": round(t.content.backspace_ratio * 100),
            "mouse_jitter": round(t.content.mouse_jitter, 1),
            "category": self.current_category().value,
            "mode": d.mode,
            "enabled": d.enabled,
            "stats": asdict(d.stats),
        }

    # ------------------------------------------------------------------
    # Host events
    # ------------------------------------------------------------------

    def _on_tab_activated(self, cmd: TabActivated, now: float) -> List[Effect]:
        if not self.durable.enabled:
            return []
        t = self.transient
        t.tab_switches.append(now)
        t.active_tab_id = cmd.tab_id
        if cmd.url:
            t.tab_urls[cmd.tab_id] = cmd.url
        url = t.tab_urls.get(cmd.tab_id)
        if url is None:
            # page not seen yet: its category arrives with the next tab update
            t.dwell.observe(DomainCategory.UNKNOWN, now)
            return []
        return self._observe_page(cmd.tab_id, url, now)

    def _on_tab_updated(self, cmd: TabUpdated, now: float) -> List[Effect]:
        if not self.durable.enabled or not cmd.url:
            return []
        t = self.transient
        t.tab_urls[cmd.tab_id] = cmd.url
        if t.active_tab_id is None:
            t.active_tab_id = cmd.tab_id
        if cmd.tab_id == t.active_tab_id:
            return self._observe_page(cmd.tab_id, cmd.url, now)
        # a background tab navigated away from the tagged distraction page
        if cmd.tab_id == t.distraction_tab_id:
            if classify_domain(cmd.url, self.durable.domains) != DomainCategory.DISTRACTION:
                t.distraction_tab_id = None
        return []

    def _on_tab_removed(self, cmd: TabRemoved, now: float) -> List[Effect]:
        t = self.transient
        t.tab_urls.pop(cmd.tab_id, None)
        if t.distraction_tab_id == cmd.tab_id:
            t.distraction_tab_id = None
        if t.active_tab_id == cmd.tab_id:
            t.active_tab_id = None
        return []

    def _on_idle_state(self, cmd: IdleStateChanged, now: float) -> List[Effect]:
        if cmd.state not in IDLE_STATES:
            raise ValueError(f"Unknown idle state: {cmd.state!r}")
        if not self.durable.enabled:
            return []
        t = self.transient
        if cmd.state in ("idle", "locked"):
            if not t.is_idle:
                t.is_idle = True
                t.idle_start = now
            return []

        effects: List[Effect] = []
        if t.is_idle and t.idle_start is not None:
            self.durable.stats.total_idle_seconds += int(max(0.0, now - t.idle_start))
            effects.append(self._persist_stats())
        t.is_idle = False
        t.idle_start = None
        return effects

    # ------------------------------------------------------------------
    # Extension messages
    # ------------------------------------------------------------------

    def _on_content_signals(self, cmd: ContentSignalsReceived, now: float) -> List[Effect]:
        if not self.durable.enabled:
            return []
        self.transient.content = replace(cmd.signals)
        return []

    def _on_reset_session(self, cmd: ResetSessionStarted, now: float) -> List[Effect]:
        t = self.transient
        self.durable.stats.reset_sessions += 1
        t.score = 0.0
        t.distraction_active = False
        t.window.clear()
        return [self._persist_stats()]

    def _on_set_mode(self, cmd: SetMode, now: float) -> List[Effect]:
        if not is_known_mode(cmd.mode):
            raise ValueError(f"Unknown focus mode: {cmd.mode!r}")
        t = self.transient
        self.durable.mode = cmd.mode
        t.score = 0.0
        t.distraction_active = False
        t.window.clear()
        logger.info("Focus mode set to %s", cmd.mode)
        return [PersistState({"focusMode": cmd.mode})]

    def _on_set_enabled(self, cmd: SetEnabled, now: float) -> List[Effect]:
        effects: List[Effect] = [PersistState({"enabled": cmd.enabled})]
        t = self.transient
        if not cmd.enabled:
            for tab_id in _unique([t.active_tab_id, t.distraction_tab_id]):
                effects.append(ClearInterventions(tab_id, t.tab_urls.get(tab_id)))
        if cmd.enabled != self.durable.enabled:
            self.durable.enabled = cmd.enabled
            self.state.transient = self._cold(now)
            logger.info("Engine %s", "enabled" if cmd.enabled else "disabled")
        return effects

    def _on_update_domains(self, cmd: UpdateCustomDomains, now: float) -> List[Effect]:
        self.durable.domains.set_custom(productive=cmd.productive, distraction=cmd.distraction)
        effects: List[Effect] = [PersistState(self.durable.custom_domains_patch())]
        # the page in view may have changed category
        t = self.transient
        url = t.tab_urls.get(t.active_tab_id) if t.active_tab_id is not None else None
        if self.durable.enabled and url:
            effects.extend(self._observe_page(t.active_tab_id, url, now))
        return effects

    def _on_get_metrics(self, cmd: GetMetrics, now: float) -> List[Effect]:
        return [BroadcastMetrics(self.snapshot(now))]

    def _on_close_tab(self, cmd: CloseTab, now: float) -> List[Effect]:
        t = self.transient
        tab_id = cmd.tab_id if cmd.tab_id is not None else t.distraction_tab_id
        if tab_id is None:
            logger.warning("CLOSE_TAB without a target tab; ignoring")
            return []
        if t.distraction_tab_id == tab_id:
            t.distraction_tab_id = None
        return [CloseTabRequest(tab_id)]

    # ------------------------------------------------------------------
    # Periodic ticks
    # ------------------------------------------------------------------

    def _on_scoring_tick(self, cmd: ScoringTick, now: float) -> List[Effect]:
        if not self.durable.enabled:
            return []
        effects: List[Effect] = []
        d, t = self.durable, self.transient

        today = day_stamp(now)
        if d.stats.date != today:
            d.stats = Stats.fresh(today)
            effects.append(self._persist_stats())

        t.tab_switches.prune(now)

        try:
            thresholds = self.thresholds
            evaluation = evaluate_signals(t, thresholds, now)
            context = ActivityContext(
                is_typing_recently=t.content.is_typing_recently,
                is_scrolling_recently=t.content.is_scrolling_recently,
                scroll_velocity=t.content.scroll_velocity,
            )
            classification = classify_activity(
                evaluation.signals, context, thresholds, self.current_category()
            )
        except Exception:
            logger.exception("Scoring cycle failed; state left unchanged")
            return effects

        t.last_evaluation = evaluation
        t.last_classification = classification
        t.score = evaluation.score
        t.window.push(classification.label)

        decision = self._gate.decide(t.distraction_active, t.window)
        if decision == GateDecision.ENTER:
            effects.extend(self._enter_distracted("confirmed"))
        elif decision == GateDecision.EXIT:
            self._exit_distracted()

        if t.dwell.due(now, t.distraction_active):
            effects.extend(self._enter_distracted("dwell"))

        effects.append(BroadcastMetrics(self.snapshot(now)))
        return effects

    def _on_decay_tick(self, cmd: DecayTick, now: float) -> List[Effect]:
        t = self.transient
        t.score = decay_score(t.score, now - t.last_decay, self._cfg.score_half_life_s)
        t.last_decay = now
        return []

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _cold(self, now: float) -> TransientState:
        return TransientState.cold(
            now,
            switch_window_s=self._cfg.tab_switch_window_s,
            confirmation_cycles=self._cfg.confirmation_cycles,
            dwell_threshold_s=self._cfg.dwell_threshold_s,
        )

    def _observe_page(self, tab_id: int, url: str, now: float) -> List[Effect]:
        t = self.transient
        category = classify_domain(url, self.durable.domains)
        if category == DomainCategory.DISTRACTION:
            t.distraction_tab_id = tab_id
        elif t.distraction_tab_id == tab_id:
            t.distraction_tab_id = None

        edge = t.dwell.observe(category, now)
        if edge and not t.distraction_active:
            return self._enter_distracted("productive_to_distraction")
        return []

    def _enter_distracted(self, reason: str) -> List[Effect]:
        t, d = self.transient, self.durable
        t.distraction_active = True
        d.stats.distractions_detected += 1
        target = t.distraction_tab_id if t.distraction_tab_id is not None else t.active_tab_id
        logger.info("Drift detected (%s); intervening on tab %s", reason, target)
        return [
            self._persist_stats(),
            TriggerIntervention(target, d.mode, t.tab_urls.get(target) if target is not None else None, reason),
        ]

    def _exit_distracted(self) -> None:
        self.transient.distraction_active = False
        self.transient.window.clear()
        logger.info("Focus recovered")

    def _persist_stats(self) -> PersistState:
        return PersistState({"stats": self.durable.stats.to_store()})


def _unique(tab_ids: List[Optional[int]]) -> List[int]:
    seen: List[int] = []
    for tab_id in tab_ids:
        if tab_id is not None and tab_id not in seen:
            seen.append(tab_id)
    return seen
