"""
Hysteresis Gate: the FOCUSED / DISTRACTED state machine.

Entry needs every label in a full confirmation window to be DISTRACTED.
Exit needs the window to hold no DISTRACTED label at all, so any mix of
READING, WORKING, UNCERTAIN, ... counts toward recovery. A label stream that
hovers around the drift boundary can neither complete an entry streak nor
an exit streak, and the state holds.
"""

from __future__ import annotations

from enum import Enum

from .confirmation import ConfirmationWindow


class FocusState(str, Enum):
    FOCUSED = "FOCUSED"
    DISTRACTED = "DISTRACTED"


class GateDecision(str, Enum):
    ENTER = "enter"      # FOCUSED → DISTRACTED
    EXIT = "exit"        # DISTRACTED → FOCUSED
    HOLD = "hold"


class HysteresisGate:
    """Stateless: the controller owns ``distraction_active`` and applies the side effects."""

    def decide(self, distraction_active: bool, window: ConfirmationWindow) -> GateDecision:
        if not distraction_active and window.confirmed_distracted:
            return GateDecision.ENTER
        if distraction_active and window.confirmed_recovered:
            return GateDecision.EXIT
        return GateDecision.HOLD

    @staticmethod
    def state_of(distraction_active: bool) -> FocusState:
        return FocusState.DISTRACTED if distraction_active else FocusState.FOCUSED
