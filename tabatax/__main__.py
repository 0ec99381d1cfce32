"""Run TabataX from a terminal: python -m tabatax."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PyQt6.QtCore import QCoreApplication, QTimer

from .audio.cues import CuePlayer
from .database.db import init_db
from .database.store import load_local, save_local
from .settings import default_export_dir, load_settings
from .timer.engine import RunController
from .timer.state import Phase, Status, TimerState
from .workout.document import WorkoutFormatError, export_workout, import_workout
from .workout.durations import format_time

logger = logging.getLogger("tabatax")

# Long enough for the victory fanfare and the closing phrase.
FINISH_LINGER_MS = 2500


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="tabatax", description="Interval workout timer")
    parser.add_argument("--workout", type=Path, help="import a workout JSON file")
    parser.add_argument("--load", action="store_true", help="use the locally saved workout")
    parser.add_argument("--save", action="store_true", help="save the workout locally and exit")
    parser.add_argument("--export", type=Path, nargs="?", const=True,
                        help="export the workout to DIR (default: settings export dir) and exit")
    parser.add_argument("--total", action="store_true", help="print the total duration and exit")
    parser.add_argument("--mute", action="store_true", help="no sounds or speech")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def _describe(controller: RunController, state: TimerState) -> str:
    if state.phase == Phase.WORK:
        ex = controller.active_exercise
        name = ex.name if ex is not None else "?"
        return f"Set {state.current_set}/{controller.config.num_sets} — {name}"
    if state.phase == Phase.REST:
        nxt = controller.next_exercise
        return f"Rest — next: {nxt.name}" if nxt is not None else "Rest"
    if state.phase == Phase.SET_REST:
        return f"Set rest — set {state.current_set + 1} next"
    if state.phase == Phase.FINISHED:
        return "Workout complete!"
    return "Get ready"


def status_handler(controller: RunController, app, linger_ms: int = FINISH_LINGER_MS):
    """Slot that ends the console run once the controller stops.

    A finished run lingers so the closing cues are heard before the
    emitter is disposed; a forced stop quits straight away.
    """

    def _stop() -> None:
        controller.shutdown()
        app.quit()

    def _on_status(status: Status) -> None:
        if status == Status.FINISHED:
            QTimer.singleShot(linger_ms, _stop)
        elif status == Status.IDLE:
            _stop()

    return _on_status


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.verbose)
    settings = load_settings()
    init_db()

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName("TabataX")
    app.setOrganizationName("TabataX")

    player = CuePlayer(
        volume=settings.sound_volume,
        sound_enabled=settings.sound_enabled,
        speech_enabled=settings.speech_enabled,
        speech_rate=settings.speech_rate,
    )
    controller = RunController(
        emitter=player,
        lead_in=settings.lead_in_seconds,
        muted=args.mute or settings.muted,
    )

    try:
        if args.workout is not None:
            controller.load_workout(*import_workout(args.workout))
        elif args.load:
            saved = load_local()
            if saved is None:
                logger.error("No saved workout found.")
                return 1
            controller.load_workout(*saved)
    except WorkoutFormatError as exc:
        logger.error("Invalid workout: %s", exc)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Cannot read workout: %s", exc)
        return 1

    if args.save:
        save_local(controller.config, controller.exercises)
        return 0
    if args.export is not None:
        directory = default_export_dir(settings) if args.export is True else args.export
        print(export_workout(controller.config, controller.exercises, directory))
        return 0
    if args.total:
        print(f"{controller.formatted_total} Total")
        return 0

    controller.phase_changed.connect(
        lambda state: print(f"\n{_describe(controller, state)} ({state.max_time}s)")
    )
    controller.tick.connect(lambda left: print(f"  {format_time(left)}", end="\r", flush=True))

    controller.status_changed.connect(status_handler(controller, app))

    print(f"{len(controller.exercises)} exercises × {controller.config.num_sets} sets, "
          f"{controller.formatted_total} total")
    print(_describe(controller, controller.state))
    controller.start()
    if controller.status != Status.RUNNING:
        logger.error("Nothing to run: add some exercises first.")
        return 1
    try:
        return app.exec()
    except KeyboardInterrupt:
        controller.shutdown()
        return 130


if __name__ == "__main__":
    sys.exit(main())
