"""
FastAPI application: local drift-detection API for the browser extension.
Runs on http://127.0.0.1:8765 by default.

The runtime (controller, store, outbox) lives on app.state; each call to
create_app() produces an independent instance.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..commands import Command, DecayTick, Effect, ScoringTick, TriggerIntervention
from ..config import config
from ..runtime import EngineRuntime
from ..storage import StateStore

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Background cycles
# ---------------------------------------------------------------------------

async def _periodic_loop(
    runtime: EngineRuntime,
    make_command: Callable[[], Command],
    interval_ms: int,
) -> None:
    while True:
        await asyncio.sleep(interval_ms / 1000.0)
        try:
            await runtime.dispatch(make_command())
        except Exception:
            logger.exception("Periodic %s failed", make_command.__name__)


# ---------------------------------------------------------------------------
# Lifespan: initialises and tears down all per-app state
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    store = StateStore(Path(app.state.data_dir) / config.state_file)
    app.state.runtime = EngineRuntime(store)
    app.state.last_intervention = None

    def _on_effect(effect: Effect):
        if isinstance(effect, TriggerIntervention):
            app.state.last_intervention = {
                "tab_id": effect.tab_id,
                "mode": effect.mode,
                "reason": effect.reason,
            }

    app.state.runtime.register_listener(_on_effect)

    tasks = []
    if app.state.run_cycles:
        tasks = [
            asyncio.create_task(_periodic_loop(app.state.runtime, ScoringTick, config.scoring_interval_ms)),
            asyncio.create_task(_periodic_loop(app.state.runtime, DecayTick, config.decay_interval_ms)),
        ]

    yield

    for task in tasks:
        task.cancel()
    for task in tasks:
        try:
            await task
        except asyncio.CancelledError:
            pass


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(data_dir: Optional[Path] = None, run_cycles: bool = True) -> FastAPI:
    app = FastAPI(
        title="DriftGuard",
        description="Local focus-drift detection engine for the browser extension",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.data_dir = Path(data_dir) if data_dir is not None else config.data_dir
    app.state.run_cycles = run_cycles

    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=r"^(chrome-extension|moz-extension)://.*$",
        allow_origins=["http://localhost:5173", "null"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from .routers import domains, events, messages, metrics, tabs, telemetry

    app.include_router(events.router)
    app.include_router(messages.router)
    app.include_router(metrics.router)
    app.include_router(tabs.router)
    app.include_router(telemetry.router)
    app.include_router(domains.router)

    @app.get("/health")
    def health(request: Request):
        runtime = getattr(request.app.state, "runtime", None)
        enabled = runtime.controller.durable.enabled if runtime else None
        return {
            "status": "ok",
            "version": "0.1.0",
            "enabled": enabled,
            "last_intervention": getattr(request.app.state, "last_intervention", None),
        }

    return app


app = create_app()
