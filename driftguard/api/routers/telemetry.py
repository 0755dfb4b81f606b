"""
/telemetry: raw key / mouse / scroll samples from a page.
The engine reduces them to content signals itself.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from ...api.schemas import SampleBatchIn

router = APIRouter(prefix="/telemetry", tags=["telemetry"])


def _get_runtime(request: Request):
    return request.app.state.runtime


@router.post("/samples", status_code=status.HTTP_202_ACCEPTED)
async def ingest_samples(batch: SampleBatchIn, runtime=Depends(_get_runtime)):
    """Accept a batch of samples for one tab (plugins buffer locally between posts)."""
    await runtime.ingest_samples(batch.tab_id, batch.samples)
    content = runtime.controller.transient.content
    return {
        "accepted": len(batch.samples),
        "signals": {
            "backspace_ratio": content.backspace_ratio,
            "mouse_jitter": content.mouse_jitter,
            "scroll_velocity": content.scroll_velocity,
            "is_typing_recently": content.is_typing_recently,
            "is_scrolling_recently": content.is_scrolling_recently,
        },
    }
