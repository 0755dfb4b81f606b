"""
Confirmation Window: a classification has to hold for several consecutive
scoring cycles before the hysteresis gate acts on it.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, List

from ..inference.activity_classifier import ActivityLabel


class ConfirmationWindow:

    def __init__(self, capacity: int = 2):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._labels: Deque[ActivityLabel] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._labels)

    def push(self, label: ActivityLabel) -> None:
        self._labels.append(label)   # maxlen evicts the oldest

    def clear(self) -> None:
        self._labels.clear()

    def labels(self) -> List[ActivityLabel]:
        return list(self._labels)

    @property
    def is_full(self) -> bool:
        return len(self._labels) == self.capacity

    @property
    def confirmed_distracted(self) -> bool:
        return self.is_full and all(l == ActivityLabel.DISTRACTED for l in self._labels)

    @property
    def confirmed_recovered(self) -> bool:
        return all(l != ActivityLabel.DISTRACTED for l in self._labels)
