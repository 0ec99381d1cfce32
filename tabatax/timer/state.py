"""Pure phase state machine for the interval timer.

Phases
------
GET_READY   Short lead-in before the first exercise.
WORK        Exercise ``ex_index`` of set ``current_set`` in progress.
REST        Rest between two exercises of the same set.
SET_REST    Longer rest between sets.
FINISHED    Terminal — the last exercise of the last set is done.

Transitions (only when the clock runs out on a running tick)
------------------------------------------------------------
GET_READY → WORK(0)
WORK(i)   → REST                 i < last
WORK(i)   → SET_REST             i == last, sets remain
WORK(i)   → FINISHED             i == last, final set
REST      → WORK(i + 1)
SET_REST  → WORK(0), set + 1

:func:`advance` never touches audio or Qt.  It returns the new state plus
the cues to play, and the :class:`~tabatax.timer.engine.RunController`
decides what to do with them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Sequence

from ..workout.durations import resolve_rest, resolve_work
from ..workout.models import Config, Exercise


# ── enums ─────────────────────────────────────────────────────────────────


class Phase(Enum):
    GET_READY = "getReady"
    WORK = "work"
    REST = "rest"
    SET_REST = "setRest"
    FINISHED = "finished"


class Status(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


class CueKind(Enum):
    TICK = "tick"
    BELL = "bell"
    WHISTLE = "whistle"
    VICTORY = "victory"


class SpeechCategory(Enum):
    START = "start"
    REST = "rest"
    COMPLETE = "complete"


# ── constants ─────────────────────────────────────────────────────────────

LEAD_IN_SECONDS = 5
COUNTDOWN_CUE_SECONDS = 3  # "tick" cue once the clock shows 3, 2, 1


# ── value types ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Speech:
    text: str
    category: SpeechCategory


@dataclass(frozen=True)
class Cue:
    kind: CueKind
    speech: Speech | None = None


@dataclass(frozen=True)
class TimerState:
    """Snapshot of where the workout is.

    ``active_id`` is the stable id of the exercise in play.  It is the
    source of truth at transition time; ``ex_index`` is the position it
    had when the phase began.  Once the id has vanished, ``ex_index`` is the
    slot the following exercise has shifted into.
    """

    current_set: int = 1
    ex_index: int = 0
    phase: Phase = Phase.GET_READY
    time_left: int = LEAD_IN_SECONDS
    max_time: int = LEAD_IN_SECONDS
    completed: frozenset[tuple[int, str]] = field(default_factory=frozenset)
    active_id: str | None = None

    @property
    def is_fresh(self) -> bool:
        """True before the first tick of a run has changed anything."""
        return (
            self.phase == Phase.GET_READY
            and self.time_left == self.max_time
            and not self.completed
        )


@dataclass(frozen=True)
class TickResult:
    state: TimerState
    cues: tuple[Cue, ...] = ()
    stop: Status | None = None  # status the controller must switch to
    transitioned: bool = False


def initial_state(lead_in: int = LEAD_IN_SECONDS) -> TimerState:
    lead_in = max(0, int(lead_in))
    return TimerState(time_left=lead_in, max_time=lead_in)


# ── helpers ───────────────────────────────────────────────────────────────


def _index_of(exercises: Sequence[Exercise], exercise_id: str | None) -> int | None:
    if exercise_id is None:
        return None
    for i, ex in enumerate(exercises):
        if ex.id == exercise_id:
            return i
    return None


def _at(exercises: Sequence[Exercise], index: int) -> Exercise | None:
    if 0 <= index < len(exercises):
        return exercises[index]
    return None


def locate_active(
    state: TimerState, exercises: Sequence[Exercise]
) -> tuple[int, Exercise | None]:
    """Current position of the active exercise.

    Looks the exercise up by id, so reordering while idle is harmless.  If
    the id is gone, everything after it has shifted down one slot: the
    exercise that followed now sits at ``ex_index``, so the vanished one is
    reported at ``ex_index - 1`` with ``None``.
    """
    idx = _index_of(exercises, state.active_id)
    if idx is not None:
        return idx, exercises[idx]
    if state.active_id is None:
        return state.ex_index, _at(exercises, state.ex_index)
    return state.ex_index - 1, None


def _start_cue(text: str) -> Cue:
    return Cue(CueKind.BELL, Speech(text, SpeechCategory.START))


def _rest_cue() -> Cue:
    return Cue(CueKind.WHISTLE, Speech("Rest", SpeechCategory.REST))


def _enter_work(
    state: TimerState,
    exercises: Sequence[Exercise],
    config: Config,
    index: int,
    *,
    current_set: int,
    announce_set: bool = False,
) -> TickResult:
    ex = _at(exercises, index)
    duration = resolve_work(ex, config)
    name = ex.name if ex is not None else ""
    if announce_set:
        text = f"Set {current_set}, {name}" if name else f"Set {current_set}"
    else:
        text = name
    new_state = replace(
        state,
        phase=Phase.WORK,
        ex_index=index,
        active_id=ex.id if ex is not None else None,
        current_set=current_set,
        time_left=duration,
        max_time=duration,
    )
    return TickResult(new_state, (_start_cue(text),), transitioned=True)


# ── transition function ───────────────────────────────────────────────────


def advance(
    state: TimerState, config: Config, exercises: Sequence[Exercise]
) -> TickResult:
    """Apply one running tick of the clock.

    Returns the next state, the cues the transition calls for and, when
    the run must stop, the status to switch to.
    """
    if len(exercises) == 0:
        return TickResult(state, stop=Status.IDLE)

    if state.phase == Phase.FINISHED:
        return TickResult(state, stop=Status.FINISHED)

    # ── countdown ─────────────────────────────────────────────────────
    if state.time_left > 1:
        remaining = state.time_left - 1
        cues: tuple[Cue, ...] = ()
        if remaining <= COUNTDOWN_CUE_SECONDS:
            cues = (Cue(CueKind.TICK),)
        return TickResult(replace(state, time_left=remaining), cues)

    # ── phase transition ──────────────────────────────────────────────
    if state.phase == Phase.GET_READY:
        return _enter_work(
            state, exercises, config, 0, current_set=state.current_set
        )

    if state.phase == Phase.WORK:
        idx, ex = locate_active(state, exercises)
        completed = state.completed
        if ex is not None:
            completed = completed | {(state.current_set, ex.id)}
        last = len(exercises) - 1

        if idx >= last:
            if state.current_set >= config.num_sets:
                done = replace(
                    state,
                    phase=Phase.FINISHED,
                    ex_index=idx if ex is not None else state.ex_index,
                    time_left=0,
                    max_time=0,
                    completed=completed,
                )
                cue = Cue(CueKind.VICTORY, Speech("", SpeechCategory.COMPLETE))
                return TickResult(
                    done, (cue,), stop=Status.FINISHED, transitioned=True
                )
            rest = config.set_rest_duration
            phase = Phase.SET_REST
        else:
            rest = resolve_rest(ex, config)
            phase = Phase.REST

        resting = replace(
            state,
            phase=phase,
            # a vanished exercise keeps its id and slot so REST resolves the same way
            ex_index=idx if ex is not None else state.ex_index,
            time_left=rest,
            max_time=rest,
            completed=completed,
        )
        return TickResult(resting, (_rest_cue(),), transitioned=True)

    if state.phase == Phase.REST:
        idx, _ = locate_active(state, exercises)
        return _enter_work(
            state, exercises, config, idx + 1, current_set=state.current_set
        )

    # SET_REST
    return _enter_work(
        state, exercises, config, 0,
        current_set=state.current_set + 1,
        announce_set=True,
    )
