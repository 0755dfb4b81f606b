"""
/messages: runtime messages from content scripts and the popup.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from ...api.schemas import (
    CloseTabMsg,
    ContentSignalsMsg,
    GetMetricsMsg,
    MessageIn,
    ResetSessionStartedMsg,
    SetEnabledMsg,
    SetModeMsg,
    UpdateCustomDomainsMsg,
)
from ...commands import (
    CloseTab,
    Command,
    ContentSignalsReceived,
    GetMetrics,
    ResetSessionStarted,
    SetEnabled,
    SetMode,
    UpdateCustomDomains,
)
from ...inference.signal_evaluator import ContentSignals

router = APIRouter(prefix="/messages", tags=["messages"])


def _get_runtime(request: Request):
    return request.app.state.runtime


def _to_command(msg) -> Command:
    if isinstance(msg, ContentSignalsMsg):
        return ContentSignalsReceived(
            ContentSignals(
                backspace_ratio=msg.backspace_ratio,
                mouse_jitter=msg.mouse_jitter,
                scroll_velocity=msg.scroll_velocity,
                is_typing_recently=msg.is_typing_recently,
                is_scrolling_recently=msg.is_scrolling_recently,
            ),
            tab_id=msg.tab_id,
        )
    if isinstance(msg, ResetSessionStartedMsg):
        return ResetSessionStarted()
    if isinstance(msg, SetModeMsg):
        return SetMode(mode=msg.mode)
    if isinstance(msg, SetEnabledMsg):
        return SetEnabled(enabled=msg.enabled)
    if isinstance(msg, UpdateCustomDomainsMsg):
        return UpdateCustomDomains(
            productive=msg.custom_productive,
            distraction=msg.custom_distraction,
        )
    if isinstance(msg, GetMetricsMsg):
        return GetMetrics()
    if isinstance(msg, CloseTabMsg):
        return CloseTab(tab_id=msg.tab_id)
    raise TypeError(f"Unhandled message: {type(msg).__name__}")


@router.post("")
async def post_message(message: MessageIn, runtime=Depends(_get_runtime)):
    """Accept one extension message. GET_METRICS answers with the snapshot it broadcast."""
    msg = message.root
    effects = await runtime.dispatch(_to_command(msg))
    if isinstance(msg, GetMetricsMsg):
        return {"type": "METRICS_UPDATE", "metrics": effects[0].snapshot}
    return {"status": "accepted", "effects": [type(e).__name__ for e in effects]}
