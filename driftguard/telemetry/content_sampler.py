"""
Content Sampler: reduces raw page interaction samples (keys, mouse moves,
scroll positions) to the ContentSignals snapshot the classifier consumes.

One sampler per tab. Each log is a TimeWindow pruned on append:
  keys   : 60 s
  mouse  : 15 s  (samples closer than 100 ms are dropped)
  scroll : 10 s
"""

from __future__ import annotations

import math
import time
from typing import Optional, Tuple

import numpy as np

from ..inference.signal_evaluator import ContentSignals
from ..inference.time_window import TimeWindow

KEY_WINDOW_S = 60.0
MOUSE_WINDOW_S = 15.0
SCROLL_WINDOW_S = 10.0
MOUSE_SAMPLE_INTERVAL_S = 0.1
TYPING_RECENT_S = 15.0
SCROLLING_RECENT_S = 10.0

MIN_MOVE_PX = 2.0          # shorter moves carry no direction
MAX_JITTER = 10.0


class ContentSampler:

    def __init__(self):
        self._keys: TimeWindow[bool] = TimeWindow(KEY_WINDOW_S)             # item: is_backspace
        self._mouse: TimeWindow[Tuple[float, float]] = TimeWindow(MOUSE_WINDOW_S)
        self._scroll: TimeWindow[float] = TimeWindow(SCROLL_WINDOW_S)        # item: scrollY
        self._last_mouse_ts: Optional[float] = None

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    def record_key(self, is_backspace: bool, ts: Optional[float] = None) -> None:
        self._keys.append(time.time() if ts is None else ts, bool(is_backspace))

    def record_mouse(self, x: float, y: float, ts: Optional[float] = None) -> bool:
        """Returns False when the sample was throttled."""
        ts = time.time() if ts is None else ts
        if self._last_mouse_ts is not None and ts - self._last_mouse_ts < MOUSE_SAMPLE_INTERVAL_S:
            return False
        self._last_mouse_ts = ts
        self._mouse.append(ts, (float(x), float(y)))
        return True

    def record_scroll(self, y: float, ts: Optional[float] = None) -> None:
        self._scroll.append(time.time() if ts is None else ts, float(y))

    # ------------------------------------------------------------------
    # Reduction
    # ------------------------------------------------------------------

    def snapshot(self, now: Optional[float] = None) -> ContentSignals:
        now = time.time() if now is None else now
        for log in (self._keys, self._mouse, self._scroll):
            log.prune(now)
        return ContentSignals(
            backspace_ratio=self.backspace_ratio(),
            mouse_jitter=self.mouse_jitter(),
            scroll_velocity=self.scroll_velocity(),
            is_typing_recently=self.is_typing_recently(now),
            is_scrolling_recently=self.is_scrolling_recently(now),
        )

    def backspace_ratio(self) -> float:
        if len(self._keys) < 2:
            return 0.0
        backspaces = sum(1 for _, is_bs in self._keys if is_bs)
        return backspaces / len(self._keys)

    def mouse_jitter(self) -> float:
        """Mean turning angle between consecutive moves, scaled so π/4 → 10."""
        if len(self._mouse) < 3:
            return 0.0
        points = np.array([p for _, p in self._mouse], dtype=np.float64)
        moves = np.diff(points, axis=0)
        lengths = np.hypot(moves[:, 0], moves[:, 1])

        first, second = moves[:-1], moves[1:]
        len_first, len_second = lengths[:-1], lengths[1:]
        usable = (len_first >= MIN_MOVE_PX) & (len_second >= MIN_MOVE_PX)
        if not usable.any():
            return 0.0

        dots = np.einsum("ij,ij->i", first[usable], second[usable])
        cosines = np.clip(dots / (len_first[usable] * len_second[usable]), -1.0, 1.0)
        mean_angle = float(np.arccos(cosines).mean())
        return min(MAX_JITTER, mean_angle / (math.pi / 4) * 10)

    def scroll_velocity(self) -> float:
        """px/s between the oldest and newest scroll position in the window."""
        first, last = self._scroll.first(), self._scroll.last()
        if first is None or last is None or len(self._scroll) < 2:
            return 0.0
        elapsed = last[0] - first[0]
        if elapsed <= 0:
            return 0.0
        return abs(last[1] - first[1]) / elapsed

    def is_typing_recently(self, now: float) -> bool:
        return any(not is_bs for _, is_bs in self._keys.items_since(now - TYPING_RECENT_S))

    def is_scrolling_recently(self, now: float) -> bool:
        return self._scroll.count_since(now - SCROLLING_RECENT_S) > 0
