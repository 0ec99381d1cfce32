"""Timer package."""

from .state import (
    Phase,
    Status,
    CueKind,
    SpeechCategory,
    Cue,
    Speech,
    TimerState,
    TickResult,
    advance,
    initial_state,
    LEAD_IN_SECONDS,
)
from .engine import RunController

__all__ = [
    "Phase",
    "Status",
    "CueKind",
    "SpeechCategory",
    "Cue",
    "Speech",
    "TimerState",
    "TickResult",
    "advance",
    "initial_state",
    "LEAD_IN_SECONDS",
    "RunController",
]
