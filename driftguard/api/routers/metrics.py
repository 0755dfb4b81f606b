"""
/metrics: current drift metrics + WebSocket stream of every broadcast.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, Request, WebSocket, WebSocketDisconnect

from ...api.schemas import MetricsOut

router = APIRouter(prefix="/metrics", tags=["metrics"])


def _get_runtime(request: Request):
    return request.app.state.runtime


@router.get("", response_model=MetricsOut)
def get_metrics(runtime=Depends(_get_runtime)):
    """Return the current metrics snapshot without broadcasting it."""
    return MetricsOut(**runtime.metrics())


@router.websocket("/ws")
async def metrics_websocket(websocket: WebSocket):
    """
    WebSocket stream: sends the current snapshot on connect, then every
    snapshot the engine broadcasts (one per scoring cycle, plus GET_METRICS).
    """
    runtime = websocket.app.state.runtime
    await websocket.accept()
    queue = runtime.broadcaster.subscribe()

    async def forward():
        while True:
            await websocket.send_json(await queue.get())

    await websocket.send_json(runtime.metrics())
    sender = asyncio.create_task(forward())
    try:
        while True:
            await websocket.receive_text()   # only used to notice the disconnect
    except WebSocketDisconnect:
        pass
    finally:
        sender.cancel()
        runtime.broadcaster.unsubscribe(queue)
