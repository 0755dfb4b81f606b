"""
Dwell Override: escalation path keyed only on time spent on distraction
pages, independent of the classifier and the confirmation window.

The dwell timer starts when the observed category moves *into* DISTRACTION
and resets on any move away from it, including a move to PRODUCTIVE.
A direct PRODUCTIVE → DISTRACTION flip is reported as an edge so the caller
can escalate immediately.
"""

from __future__ import annotations

from typing import Optional

from ..inference.domain_classifier import DomainCategory


class DwellTracker:

    def __init__(self, threshold_s: float = 30.0):
        self.threshold_s = threshold_s
        self.previous: Optional[DomainCategory] = None
        self.current: Optional[DomainCategory] = None
        self.started_at: Optional[float] = None

    def observe(self, category: DomainCategory, now: float) -> bool:
        """Record the category of the page in view. Returns True on a PRODUCTIVE → DISTRACTION edge."""
        self.previous, self.current = self.current, category

        if category == DomainCategory.DISTRACTION:
            if self.previous != DomainCategory.DISTRACTION:
                self.started_at = now
        else:
            self.started_at = None

        return (
            self.previous == DomainCategory.PRODUCTIVE
            and category == DomainCategory.DISTRACTION
        )

    def elapsed(self, now: float) -> float:
        if self.started_at is None:
            return 0.0
        return max(0.0, now - self.started_at)

    def due(self, now: float, distraction_active: bool) -> bool:
        return (
            self.started_at is not None
            and not distraction_active
            and self.elapsed(now) >= self.threshold_s
        )
