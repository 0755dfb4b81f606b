"""
Engine Runtime: serialises access to the DriftController and carries out
the effects it returns (persist, deliver to tabs, broadcast metrics).

Usage:
    rt = EngineRuntime(StateStore(path))
    await rt.dispatch(TabActivated(tab_id=3, url="https://reddit.com"))
    await rt.dispatch(ScoringTick())
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from .commands import (
    BroadcastMetrics,
    ClearInterventions,
    CloseTabRequest,
    Command,
    ContentSignalsReceived,
    Effect,
    PersistState,
    TabActivated,
    TabRemoved,
    TabUpdated,
    TriggerIntervention,
    UpdateCustomDomains,
)
from .config import Config, config
from .controller import DriftController
from .storage import StateStore
from .telemetry.content_sampler import ContentSampler
from .telemetry.outbox import MetricsBroadcaster, TabMessenger

logger = logging.getLogger(__name__)


class EngineRuntime:

    def __init__(self, store: StateStore, cfg: Optional[Config] = None, now: Optional[float] = None):
        self._cfg = cfg or config
        self.store = store
        self.controller = DriftController.from_store(store.load(), cfg=self._cfg, now=now)
        self.messenger = TabMessenger()
        self.broadcaster = MetricsBroadcaster()
        self._samplers: Dict[int, ContentSampler] = {}
        self._listeners: List[Callable[[Effect], None]] = []
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def dispatch(self, command: Command, now: Optional[float] = None) -> List[Effect]:
        """Run one command under the session lock and apply its effects."""
        async with self._lock:
            if isinstance(command, UpdateCustomDomains) and command.productive is None and command.distraction is None:
                # bare UPDATE_CUSTOM_DOMAINS: lists were edited in the store directly
                stored = self.store.reload()
                command = UpdateCustomDomains(
                    productive=stored.get("customProductive") or [],
                    distraction=stored.get("customDistraction") or [],
                )
            effects = self.controller.handle(command, now)
            self._track_tabs(command)
            for effect in effects:
                self._apply(effect)
        return effects

    async def ingest_samples(self, tab_id: int, samples: Iterable[Any], now: Optional[float] = None) -> List[Effect]:
        """Feed raw interaction samples for a tab and forward the reduced signals."""
        sampler = self._samplers.setdefault(tab_id, ContentSampler())
        for s in samples:
            if s.kind == "key":
                sampler.record_key(s.is_backspace, s.ts)
            elif s.kind == "mouse":
                sampler.record_mouse(s.x, s.y, s.ts)
            elif s.kind == "scroll":
                sampler.record_scroll(s.y, s.ts)
        return await self.dispatch(ContentSignalsReceived(sampler.snapshot(now), tab_id=tab_id), now)

    def metrics(self, now: Optional[float] = None) -> Dict[str, Any]:
        return self.controller.snapshot(now)

    def register_listener(self, fn: Callable[[Effect], None]) -> None:
        """Register a callback(effect) called for every applied effect."""
        self._listeners.append(fn)

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def _apply(self, effect: Effect) -> None:
        if isinstance(effect, PersistState):
            try:
                self.store.update(effect.patch)
            except OSError:
                logger.exception("Could not persist %s", sorted(effect.patch))
        elif isinstance(effect, TriggerIntervention):
            self.messenger.send(
                effect.tab_id,
                {"type": "DISTRACTION_DETECTED", "mode": effect.mode, "reason": effect.reason},
                effect.url,
            )
        elif isinstance(effect, ClearInterventions):
            self.messenger.send(effect.tab_id, {"type": "CLEAR_INTERVENTIONS"}, effect.url)
        elif isinstance(effect, CloseTabRequest):
            self.messenger.request_close(effect.tab_id)
        elif isinstance(effect, BroadcastMetrics):
            self.broadcaster.publish(effect.snapshot)

        for listener in self._listeners:
            try:
                listener(effect)
            except Exception:
                logger.exception("Effect listener failed")

    def _track_tabs(self, command: Command) -> None:
        if isinstance(command, (TabActivated, TabUpdated)):
            self.messenger.mark_open(command.tab_id)
        elif isinstance(command, TabRemoved):
            self.messenger.mark_closed(command.tab_id)
            self._samplers.pop(command.tab_id, None)
