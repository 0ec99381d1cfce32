"""Run controller for the interval timer.

Status
------
IDLE       Not counting.  The workout may be edited.
RUNNING    1 Hz ``QTimer`` active; each timeout advances the state machine.
PAUSED     Timer frozen; ``TimerState`` kept verbatim.
FINISHED   The final work interval is done.  ``reset()`` to go again.

Transitions
-----------
IDLE → RUNNING        (start)
RUNNING → PAUSED      (pause)
PAUSED → RUNNING      (resume)
RUNNING → FINISHED    (last work interval of the last set ends)
RUNNING → IDLE        (sequence emptied / active exercise removed)
Any → IDLE            (reset)

Phase logic lives in :mod:`tabatax.timer.state`; this class only owns the
cadence, the workout data and the cue dispatch.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from ..workout.durations import format_time, total_duration
from ..workout.models import (
    DEFAULT_EXERCISES,
    Config,
    Exercise,
    ExerciseSequence,
)
from .state import (
    LEAD_IN_SECONDS,
    Phase,
    Status,
    TimerState,
    advance,
    initial_state,
    locate_active,
)

if TYPE_CHECKING:
    from ..audio.cues import CueEmitter

logger = logging.getLogger(__name__)

TICK_INTERVAL_MS = 1000


class RunController(QObject):
    """Qt-driven workout timer.

    Signals
    -------
    tick(time_left: int)
        Emitted after every running tick.
    phase_changed(state: TimerState)
        Emitted when a tick moves into a new phase, and on reset.
    status_changed(status: Status)
        Emitted on every status change.
    cue_emitted(cue: Cue)
        Emitted for every cue, muted or not.
    workout_changed()
        Emitted when the config or the exercise sequence changes.
    """

    tick = pyqtSignal(int)
    phase_changed = pyqtSignal(object)
    status_changed = pyqtSignal(object)
    cue_emitted = pyqtSignal(object)
    workout_changed = pyqtSignal()

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        config: Config | None = None,
        exercises: Iterable[Exercise] | None = None,
        emitter: CueEmitter | None = None,
        lead_in: int = LEAD_IN_SECONDS,
        muted: bool = False,
    ) -> None:
        super().__init__(parent)

        # ── workout ───────────────────────────────────────────────────
        self._config: Config = config if config is not None else Config()
        self._sequence = ExerciseSequence(
            list(exercises) if exercises is not None else list(DEFAULT_EXERCISES)
        )

        # ── run state ─────────────────────────────────────────────────
        self._lead_in: int = max(0, lead_in)
        self._status: Status = Status.IDLE
        self._state: TimerState = initial_state(self._lead_in)
        self._in_tick: bool = False

        # ── cues ──────────────────────────────────────────────────────
        self._emitter = emitter
        self._muted: bool = muted

        # ── Qt timer ──────────────────────────────────────────────────
        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(TICK_INTERVAL_MS)
        self._qt_timer.timeout.connect(self._on_tick)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def status(self) -> Status:
        return self._status

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def phase(self) -> Phase:
        return self._state.phase

    @property
    def config(self) -> Config:
        return self._config

    @property
    def exercises(self) -> list[Exercise]:
        return self._sequence.to_list()

    @property
    def is_running(self) -> bool:
        return self._status == Status.RUNNING

    @property
    def is_ticking(self) -> bool:
        """True while the 1 Hz cadence is armed."""
        return self._qt_timer.isActive()

    @property
    def muted(self) -> bool:
        return self._muted

    @muted.setter
    def muted(self, value: bool) -> None:
        self._muted = value

    @property
    def lead_in(self) -> int:
        return self._lead_in

    @property
    def total_duration(self) -> int:
        return total_duration(self._config, self._sequence)

    @property
    def formatted_total(self) -> str:
        return format_time(self.total_duration)

    @property
    def active_exercise(self) -> Exercise | None:
        """Exercise being worked on (or coming up during a rest)."""
        if self._state.phase == Phase.GET_READY and self._state.active_id is None:
            return self._sequence.at(0)
        _, ex = locate_active(self._state, self._sequence)
        return ex

    @property
    def next_exercise(self) -> Exercise | None:
        if self._state.phase == Phase.GET_READY and self._state.active_id is None:
            return self._sequence.at(1)
        idx, _ = locate_active(self._state, self._sequence)
        return self._sequence.at(idx + 1)

    @property
    def percent_complete(self) -> float:
        """0.0 → 1.0 progress through the current phase."""
        if self._state.max_time <= 0:
            return 0.0
        elapsed = self._state.max_time - self._state.time_left
        return max(0.0, min(1.0, elapsed / self._state.max_time))

    def is_completed(self, set_number: int, exercise_id: str) -> bool:
        return (set_number, exercise_id) in self._state.completed

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self) -> None:
        """Begin (or continue) the workout.  Only valid from IDLE."""
        if self._status != Status.IDLE:
            return
        if not self._sequence:
            logger.info("Start ignored: no exercises")
            return
        if self._state.phase == Phase.FINISHED:
            self._state = initial_state(self._lead_in)
            self.phase_changed.emit(self._state)
        if self._emitter is not None:
            self._emitter.resume()
        self._set_status(Status.RUNNING)
        self._qt_timer.start()

    def pause(self) -> None:
        """Freeze the countdown.  Nothing about the state is lost."""
        if self._status != Status.RUNNING:
            return
        self._qt_timer.stop()
        if self._emitter is not None:
            self._emitter.suspend()
        self._set_status(Status.PAUSED)

    def resume(self) -> None:
        """Continue from exactly where ``pause()`` left off."""
        if self._status != Status.PAUSED:
            return
        if self._emitter is not None:
            self._emitter.resume()
        self._set_status(Status.RUNNING)
        self._qt_timer.start()

    def reset(self) -> None:
        """Stop and go back to a fresh lead-in.  Completed marks are cleared."""
        self._qt_timer.stop()
        self._state = initial_state(self._lead_in)
        self.phase_changed.emit(self._state)
        self._set_status(Status.IDLE)

    def shutdown(self) -> None:
        """Stop the cadence and release the cue emitter."""
        self._qt_timer.stop()
        if self._emitter is not None:
            self._emitter.dispose()

    # ══════════════════════════════════════════════════════════════════
    #  WORKOUT EDITING (idle only)
    # ══════════════════════════════════════════════════════════════════

    def set_config(self, config: Config) -> bool:
        if self._status != Status.IDLE:
            return False
        self._config = config
        self.workout_changed.emit()
        return True

    def set_lead_in(self, seconds: int) -> None:
        self._lead_in = max(0, int(seconds))
        if self._status == Status.IDLE and self._state.is_fresh:
            self._state = initial_state(self._lead_in)

    def add_exercise(self, exercise: Exercise | None = None) -> Exercise | None:
        if self._status != Status.IDLE:
            return None
        added = self._sequence.append(exercise or Exercise())
        self.workout_changed.emit()
        return added

    def update_exercise(self, exercise_id: str, **changes: Any) -> bool:
        if self._status != Status.IDLE:
            return False
        if self._sequence.update(exercise_id, **changes) is None:
            return False
        self.workout_changed.emit()
        return True

    def move_exercise(self, exercise_id: str, new_index: int) -> bool:
        if self._status != Status.IDLE:
            return False
        if not self._sequence.move(exercise_id, new_index):
            return False
        self.workout_changed.emit()
        return True

    def remove_exercise(self, exercise_id: str) -> bool:
        """Delete an exercise.

        While a run is in progress only the active exercise may be
        removed, and doing so drops the timer back to IDLE.  The timer
        state itself is kept so the countdown can continue on ``start()``.
        """
        if self._status != Status.IDLE:
            active = self.active_exercise
            if active is None or active.id != exercise_id:
                return False
            self._qt_timer.stop()
            self._set_status(Status.IDLE)
            logger.info("Active exercise %s removed; timer stopped", exercise_id)
        if self._sequence.remove(exercise_id) is None:
            return False
        self.workout_changed.emit()
        return True

    def load_workout(self, config: Config, exercises: Iterable[Exercise]) -> None:
        """Replace the whole workout (import/load).  Always resets first."""
        self.reset()
        self._config = config
        self._sequence = ExerciseSequence(list(exercises))
        self.workout_changed.emit()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL — timer mechanics
    # ══════════════════════════════════════════════════════════════════

    def _on_tick(self) -> None:
        # A timeout already queued when pause() ran must not count.
        if self._status != Status.RUNNING or self._in_tick:
            return
        self._in_tick = True
        try:
            result = advance(self._state, self._config, self._sequence)
            self._state = result.state

            if result.stop == Status.IDLE:
                logger.info("No exercises left; stopping")
                self._qt_timer.stop()
                self._set_status(Status.IDLE)
                return

            self.tick.emit(self._state.time_left)
            if result.transitioned:
                logger.debug(
                    "→ %s (set %d, #%d, %ds)",
                    self._state.phase.value,
                    self._state.current_set,
                    self._state.ex_index,
                    self._state.max_time,
                )
                self.phase_changed.emit(self._state)

            for cue in result.cues:
                self.cue_emitted.emit(cue)
                self._dispatch(cue)

            if result.stop == Status.FINISHED:
                self._qt_timer.stop()
                self._set_status(Status.FINISHED)
        finally:
            self._in_tick = False

    def _dispatch(self, cue) -> None:
        if self._muted or self._emitter is None:
            return
        self._emitter.play(cue.kind)
        if cue.speech is not None:
            self._emitter.speak(cue.speech.text, cue.speech.category)

    def _set_status(self, new_status: Status) -> None:
        if new_status == self._status:
            return
        self._status = new_status
        self.status_changed.emit(new_status)
