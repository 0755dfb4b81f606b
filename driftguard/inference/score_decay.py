"""
Score Decay: exponential half-life decay of the display score.
"""

from __future__ import annotations

DEFAULT_HALF_LIFE_S = 30.0


def decay_score(score: float, elapsed_s: float, half_life_s: float = DEFAULT_HALF_LIFE_S) -> float:
    """score · 0.5^(elapsed / half_life), floored at 0. Negative elapsed time is ignored."""
    if half_life_s <= 0:
        raise ValueError("half_life_s must be positive")
    elapsed_s = max(0.0, elapsed_s)
    return max(0.0, score * 0.5 ** (elapsed_s / half_life_s))
