"""Tests for the Qt run controller.

Covers: start/pause/resume/reset, the 1 Hz cadence, cue dispatch and
muting, finishing, editing rules while a run is in progress, and the
safety stop when the active exercise is deleted.
"""

import pytest

from tabatax.timer.engine import RunController, TICK_INTERVAL_MS
from tabatax.timer.state import CueKind, Phase, SpeechCategory, Status
from tabatax.workout.models import Config, Exercise

from helpers import SignalCollector, finish_phase, run_to_end


# ═══════════════════════════════════════════════════════════════════════════
#  STATUS TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestStatusTransitions:

    def test_initial_status_is_idle(self, controller):
        assert controller.status == Status.IDLE
        assert controller.phase == Phase.GET_READY
        assert controller.state.time_left == controller.lead_in == 5
        assert not controller.is_ticking

    def test_start_runs_and_arms_timer(self, controller):
        controller.start()
        assert controller.status == Status.RUNNING
        assert controller.is_ticking
        assert controller._qt_timer.interval() == TICK_INTERVAL_MS

    def test_start_wakes_emitter(self, controller, emitter):
        controller.start()
        assert emitter.resumed == 1

    def test_pause_silences_emitter(self, controller, emitter):
        controller.start()
        controller.pause()
        assert emitter.suspended == 1
        controller.resume()
        assert emitter.resumed == 2
        assert emitter.disposed == 0

    def test_pause_when_idle_leaves_emitter_alone(self, controller, emitter):
        controller.pause()
        controller.resume()
        assert emitter.suspended == 0
        assert emitter.resumed == 0

    def test_pause_stops_timer(self, controller):
        controller.start()
        controller.pause()
        assert controller.status == Status.PAUSED
        assert not controller.is_ticking

    def test_resume_restarts_timer(self, controller):
        controller.start()
        controller.pause()
        controller.resume()
        assert controller.status == Status.RUNNING
        assert controller.is_ticking

    def test_pause_preserves_state(self, controller):
        controller.start()
        controller._on_tick()
        controller._on_tick()
        before = controller.state
        controller.pause()
        assert controller.state == before
        controller.resume()
        controller._on_tick()
        assert controller.state.time_left == before.time_left - 1

    def test_tick_after_pause_is_ignored(self, controller):
        """A timeout already queued when pause() ran must not count."""
        controller.start()
        controller.pause()
        before = controller.state
        controller._on_tick()
        assert controller.state == before

    def test_start_is_noop_when_running(self, controller, emitter):
        controller.start()
        controller._on_tick()
        controller.start()
        assert controller.state.time_left == 4
        assert emitter.resumed == 1

    def test_pause_is_noop_when_idle(self, controller):
        controller.pause()
        assert controller.status == Status.IDLE

    def test_resume_is_noop_when_not_paused(self, controller):
        controller.start()
        controller.resume()
        assert controller.status == Status.RUNNING

    def test_status_changed_signal(self, controller):
        c = SignalCollector()
        controller.status_changed.connect(c)
        controller.start()
        controller.pause()
        controller.resume()
        controller.reset()
        assert c.items == [Status.RUNNING, Status.PAUSED, Status.RUNNING, Status.IDLE]

    def test_start_with_no_exercises_stays_idle(self, qapp):
        ctl = RunController(exercises=[])
        ctl.start()
        assert ctl.status == Status.IDLE
        assert not ctl.is_ticking
        assert ctl.total_duration == 0


# ═══════════════════════════════════════════════════════════════════════════
#  RESET
# ═══════════════════════════════════════════════════════════════════════════


class TestReset:

    @pytest.mark.parametrize("phases_to_finish", [0, 1, 2, 4, 7])
    def test_reset_from_any_phase(self, controller, phases_to_finish):
        controller.start()
        for _ in range(phases_to_finish):
            finish_phase(controller)
        controller.reset()
        assert controller.status == Status.IDLE
        assert controller.phase == Phase.GET_READY
        assert controller.state.completed == frozenset()
        assert controller.state.current_set == 1
        assert controller.state.time_left == controller.state.max_time == 5
        assert not controller.is_ticking

    def test_reset_from_paused(self, controller):
        controller.start()
        finish_phase(controller)
        controller.pause()
        controller.reset()
        assert controller.status == Status.IDLE
        assert controller.phase == Phase.GET_READY

    def test_reset_emits_phase_changed(self, controller):
        c = SignalCollector()
        controller.phase_changed.connect(c)
        controller.reset()
        assert c.last.phase == Phase.GET_READY

    def test_custom_lead_in(self, qapp, config, two_exercises):
        ctl = RunController(config=config, exercises=two_exercises, lead_in=10)
        assert ctl.state.time_left == 10
        ctl.set_lead_in(3)
        assert ctl.state.time_left == 3


# ═══════════════════════════════════════════════════════════════════════════
#  RUNNING A WORKOUT
# ═══════════════════════════════════════════════════════════════════════════


class TestRun:

    def test_full_run_phase_order(self, controller):
        controller.start()
        assert run_to_end(controller) == [
            Phase.GET_READY,
            Phase.WORK, Phase.REST, Phase.WORK,
            Phase.SET_REST,
            Phase.WORK, Phase.REST, Phase.WORK,
            Phase.FINISHED,
        ]

    def test_finish_sets_status_and_stops(self, controller):
        c = SignalCollector()
        controller.status_changed.connect(c)
        controller.start()
        run_to_end(controller)
        assert controller.status == Status.FINISHED
        assert c.last == Status.FINISHED
        assert not controller.is_ticking

    def test_full_run_completes_all_pairs(self, controller):
        controller.start()
        run_to_end(controller)
        assert len(controller.state.completed) == 4
        assert controller.is_completed(2, "b")

    def test_tick_signal_emits_time_left(self, controller):
        c = SignalCollector()
        controller.tick.connect(c)
        controller.start()
        controller._on_tick()
        assert c.items == [4]

    def test_phase_changed_on_transition(self, controller):
        c = SignalCollector()
        controller.phase_changed.connect(c)
        controller.start()
        controller._on_tick()
        assert len(c) == 0
        finish_phase(controller)
        assert c.last.phase == Phase.WORK
        assert c.last.active_id == "a"

    def test_cues_dispatched_to_emitter(self, controller, emitter):
        controller.start()
        finish_phase(controller)  # → work(Squats)
        finish_phase(controller)  # → rest
        assert emitter.calls == [
            ("play", CueKind.BELL),
            ("speak", "Squats", SpeechCategory.START),
            ("play", CueKind.WHISTLE),
            ("speak", "Rest", SpeechCategory.REST),
        ]

    def test_countdown_ticks_dispatched(self, controller, emitter):
        controller.start()
        for _ in range(4):
            controller._on_tick()  # 4, 3, 2, 1
        assert emitter.sounds == [CueKind.TICK, CueKind.TICK, CueKind.TICK]

    def test_victory_at_end(self, controller, emitter):
        controller.start()
        run_to_end(controller)
        assert emitter.sounds[-1] == CueKind.VICTORY
        assert emitter.spoken[-1] == ("", SpeechCategory.COMPLETE)

    def test_muted_suppresses_dispatch_but_not_signal(self, controller, emitter):
        c = SignalCollector()
        controller.cue_emitted.connect(c)
        controller.muted = True
        controller.start()
        finish_phase(controller)
        assert emitter.calls == []
        assert c.last.kind == CueKind.BELL

    def test_start_after_finish_needs_reset(self, controller):
        controller.start()
        run_to_end(controller)
        controller.start()
        assert controller.status == Status.FINISHED
        controller.reset()
        controller.start()
        assert controller.status == Status.RUNNING
        assert controller.phase == Phase.GET_READY

    def test_percent_complete(self, controller):
        controller.start()
        finish_phase(controller)  # 20 s work
        for _ in range(10):
            controller._on_tick()
        assert controller.percent_complete == pytest.approx(0.5)

    def test_active_and_next_exercise(self, controller):
        assert controller.active_exercise.id == "a"
        assert controller.next_exercise.id == "b"
        controller.start()
        finish_phase(controller)
        finish_phase(controller)  # rest after Squats
        assert controller.active_exercise.id == "a"
        assert controller.next_exercise.id == "b"

    def test_formatted_total(self, controller):
        assert controller.total_duration == 130
        assert controller.formatted_total == "2:10"

    def test_shutdown_disposes_emitter(self, controller, emitter):
        controller.start()
        controller.shutdown()
        assert not controller.is_ticking
        assert emitter.disposed == 1


# ═══════════════════════════════════════════════════════════════════════════
#  EDITING
# ═══════════════════════════════════════════════════════════════════════════


class TestEditing:

    def test_edits_allowed_when_idle(self, controller):
        added = controller.add_exercise(Exercise(name="Lunges"))
        assert added is not None
        assert controller.update_exercise(added.id, custom_duration=40)
        assert controller.move_exercise(added.id, 0)
        assert controller.exercises[0].custom_duration == 40
        assert controller.set_config(Config(num_sets=5))
        assert controller.config.num_sets == 5
        assert controller.remove_exercise(added.id)

    def test_workout_changed_signal(self, controller):
        c = SignalCollector()
        controller.workout_changed.connect(c)
        controller.add_exercise()
        assert len(c) == 1

    def test_edits_rejected_while_running(self, controller):
        controller.start()
        assert controller.add_exercise() is None
        assert not controller.update_exercise("a", name="X")
        assert not controller.move_exercise("b", 0)
        assert not controller.set_config(Config(num_sets=9))
        assert [e.id for e in controller.exercises] == ["a", "b"]
        assert controller.config.num_sets == 2

    def test_removing_inactive_exercise_while_running_rejected(self, controller):
        controller.start()
        finish_phase(controller)  # working on "a"
        assert not controller.remove_exercise("b")
        assert controller.status == Status.RUNNING
        assert len(controller.exercises) == 2

    def test_removing_active_exercise_forces_idle(self, controller):
        controller.start()
        finish_phase(controller)  # working on "a"
        assert controller.remove_exercise("a")
        assert controller.status == Status.IDLE
        assert not controller.is_ticking
        assert [e.id for e in controller.exercises] == ["b"]

    def test_removing_active_while_paused_forces_idle(self, controller):
        controller.start()
        finish_phase(controller)
        controller.pause()
        assert controller.remove_exercise("a")
        assert controller.status == Status.IDLE

    def test_continue_after_active_removed(self, controller):
        """Restarting after the safety stop degrades to defaults."""
        controller.start()
        finish_phase(controller)  # work "a"
        controller.remove_exercise("a")
        controller.start()
        assert controller.status == Status.RUNNING
        finish_phase(controller)
        # "b" is still to come in this set.
        assert controller.phase == Phase.REST
        assert controller.state.max_time == controller.config.rest_duration
        assert controller.state.completed == frozenset()
        finish_phase(controller)
        assert controller.active_exercise.id == "b"

    def test_removing_last_exercise_then_tick_goes_idle(self, qapp, config):
        ctl = RunController(config=config, exercises=[Exercise(id="x", name="Solo")])
        ctl.start()
        assert ctl.remove_exercise("x")
        ctl._status = Status.RUNNING  # simulate a tick racing the removal
        ctl._on_tick()
        assert ctl.status == Status.IDLE

    def test_load_workout_resets(self, controller):
        controller.start()
        finish_phase(controller)
        controller.load_workout(Config(num_sets=1), [Exercise(id="z", name="Row")])
        assert controller.status == Status.IDLE
        assert controller.phase == Phase.GET_READY
        assert [e.id for e in controller.exercises] == ["z"]
        assert controller.config.num_sets == 1


# ═══════════════════════════════════════════════════════════════════════════
#  REMOVING THE ACTIVE EXERCISE
# ═══════════════════════════════════════════════════════════════════════════


class TestRemovalContinuity:
    """Deleting the active exercise must not skip the one after it."""

    @pytest.fixture
    def circuit(self, qapp, emitter):
        ctl = RunController(
            config=Config(num_sets=1),
            exercises=[Exercise(id=i, name=i.upper()) for i in "abc"],
            emitter=emitter,
        )
        yield ctl
        ctl.shutdown()

    def _worked(self, ctl):
        """Finish phases to the end; returns the ids of every work phase."""
        worked = []
        while ctl.is_running:
            finish_phase(ctl)
            if ctl.phase == Phase.WORK:
                worked.append(ctl.state.active_id)
        return worked

    def test_removed_during_get_ready(self, circuit):
        circuit.start()
        assert circuit.remove_exercise("a")
        assert circuit.status == Status.IDLE
        circuit.start()
        assert self._worked(circuit) == ["b", "c"]
        assert circuit.state.completed == {(1, "b"), (1, "c")}

    def test_removed_during_work(self, circuit):
        circuit.start()
        finish_phase(circuit)  # work "a"
        assert circuit.remove_exercise("a")
        assert circuit.next_exercise.id == "b"
        circuit.start()
        assert self._worked(circuit) == ["b", "c"]
        assert circuit.state.completed == {(1, "b"), (1, "c")}

    def test_removed_during_rest(self, circuit):
        circuit.start()
        finish_phase(circuit)  # work "a"
        finish_phase(circuit)  # rest after "a"
        assert circuit.remove_exercise("a")
        circuit.start()
        assert self._worked(circuit) == ["b", "c"]
        assert circuit.state.completed == {(1, "a"), (1, "b"), (1, "c")}
        assert circuit.status == Status.FINISHED
