"""
/tabs: outbound delivery polled by the extension.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...api.schemas import CloseRequestsOut, TabMessagesOut

router = APIRouter(prefix="/tabs", tags=["tabs"])


def _get_runtime(request: Request):
    return request.app.state.runtime


@router.get("/close-requests", response_model=CloseRequestsOut)
def close_requests(runtime=Depends(_get_runtime)):
    """Tabs the extension should close (sent after a reset session ends)."""
    return CloseRequestsOut(tab_ids=runtime.messenger.drain_close_requests())


@router.get("/{tab_id}/messages", response_model=TabMessagesOut)
def tab_messages(tab_id: int, runtime=Depends(_get_runtime)):
    """Drain queued messages (DISTRACTION_DETECTED, CLEAR_INTERVENTIONS) for one tab."""
    return TabMessagesOut(tab_id=tab_id, messages=runtime.messenger.drain(tab_id))
