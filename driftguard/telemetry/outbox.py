"""
Outbound delivery to the browser extension.

TabMessenger       per-tab message queues the content scripts poll, plus a
                   queue of tabs the extension should close.
MetricsBroadcaster fan-out of metrics snapshots to WebSocket subscribers.

Delivery is best-effort: messages for closed tabs, missing tab ids and
restricted pages are dropped with a warning and never retried.
"""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Set

logger = logging.getLogger(__name__)

# Pages where no content script runs
RESTRICTED_PREFIXES = (
    "chrome://",
    "chrome-extension://",
    "edge://",
    "about:",
    "view-source:",
    "devtools://",
    "file://",
    "moz-extension://",
)

MAX_QUEUED_PER_TAB = 20


def is_restricted_url(url: Optional[str]) -> bool:
    return bool(url) and url.strip().lower().startswith(RESTRICTED_PREFIXES)


class TabMessenger:

    def __init__(self):
        self._queues: Dict[int, Deque[Dict[str, Any]]] = {}
        self._closed: Set[int] = set()
        self._close_requests: Deque[int] = deque()

    def send(self, tab_id: Optional[int], message: Dict[str, Any], url: Optional[str] = None) -> bool:
        """Queue *message* for *tab_id*. Returns False when delivery was skipped."""
        if tab_id is None:
            logger.warning("No target tab for %s; skipped", message.get("type"))
            return False
        if tab_id in self._closed:
            logger.warning("Tab %s is closed; %s skipped", tab_id, message.get("type"))
            return False
        if is_restricted_url(url):
            logger.warning("Tab %s shows a restricted page (%s); %s skipped", tab_id, url, message.get("type"))
            return False
        queue = self._queues.setdefault(tab_id, deque(maxlen=MAX_QUEUED_PER_TAB))
        queue.append(message)
        return True

    def drain(self, tab_id: int) -> List[Dict[str, Any]]:
        queue = self._queues.pop(tab_id, None)
        return list(queue) if queue else []

    def mark_open(self, tab_id: int) -> None:
        self._closed.discard(tab_id)

    def mark_closed(self, tab_id: int) -> None:
        self._closed.add(tab_id)
        self._queues.pop(tab_id, None)

    def request_close(self, tab_id: int) -> None:
        if tab_id in self._closed:
            logger.warning("Tab %s already closed; close request skipped", tab_id)
            return
        if tab_id not in self._close_requests:
            self._close_requests.append(tab_id)

    def drain_close_requests(self) -> List[int]:
        tabs = list(self._close_requests)
        self._close_requests.clear()
        return tabs


class MetricsBroadcaster:

    def __init__(self, queue_size: int = 16):
        self._queue_size = queue_size
        self._subscribers: Set[asyncio.Queue] = set()
        self.latest: Optional[Dict[str, Any]] = None

    def subscribe(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        if self.latest is not None:
            queue.put_nowait(self.latest)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, snapshot: Dict[str, Any]) -> None:
        self.latest = snapshot
        for queue in list(self._subscribers):
            if queue.full():
                # slow consumer: keep only the newest snapshots
                queue.get_nowait()
            queue.put_nowait(snapshot)
