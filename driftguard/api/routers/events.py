"""
/events: tab and idle events forwarded by the extension's background worker.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from ...api.schemas import IdleStateIn, TabActivatedIn, TabRemovedIn, TabUpdatedIn
from ...commands import IdleStateChanged, TabActivated, TabRemoved, TabUpdated

router = APIRouter(prefix="/events", tags=["events"])


def _get_runtime(request: Request):
    """Dependency: resolved by the app lifespan state."""
    return request.app.state.runtime


def _summary(effects) -> dict:
    return {
        "status": "accepted",
        "effects": [type(e).__name__ for e in effects],
    }


@router.post("/tab-activated", status_code=status.HTTP_202_ACCEPTED)
async def tab_activated(event: TabActivatedIn, runtime=Depends(_get_runtime)):
    effects = await runtime.dispatch(TabActivated(tab_id=event.tab_id, url=event.url))
    return _summary(effects)


@router.post("/tab-updated", status_code=status.HTTP_202_ACCEPTED)
async def tab_updated(event: TabUpdatedIn, runtime=Depends(_get_runtime)):
    effects = await runtime.dispatch(
        TabUpdated(tab_id=event.tab_id, url=event.url, status=event.status)
    )
    return _summary(effects)


@router.post("/tab-removed", status_code=status.HTTP_202_ACCEPTED)
async def tab_removed(event: TabRemovedIn, runtime=Depends(_get_runtime)):
    effects = await runtime.dispatch(TabRemoved(tab_id=event.tab_id))
    return _summary(effects)


@router.post("/idle", status_code=status.HTTP_202_ACCEPTED)
async def idle_state(event: IdleStateIn, runtime=Depends(_get_runtime)):
    effects = await runtime.dispatch(IdleStateChanged(state=event.state))
    return _summary(effects)
