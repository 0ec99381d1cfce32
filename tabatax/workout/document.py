"""Workout document: the JSON shape shared by export, import and local saves.

Shape::

    {"config": {"workDuration": 20, "restDuration": 10,
                "setRestDuration": 30, "numSets": 3},
     "exercises": [{"id": "1", "name": "Burpees", "notes": "",
                    "customDuration": null, "customRest": null,
                    "icon": "hiit"}, ...]}

Parsing is all-or-nothing: a document is fully validated before anything
is returned, so callers never apply half an import.
"""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Iterable

from .models import Config, Exercise, ExerciseSequence

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "tabata-workout"


class WorkoutFormatError(ValueError):
    """Raised when a workout document is malformed."""


def to_document(config: Config, exercises: Iterable[Exercise]) -> dict[str, Any]:
    return {
        "config": config.to_dict(),
        "exercises": [ex.to_dict() for ex in exercises],
    }


def dumps_document(config: Config, exercises: Iterable[Exercise]) -> str:
    return json.dumps(to_document(config, exercises), indent=2)


def parse_document(data: Any) -> tuple[Config, list[Exercise]]:
    """Validate a decoded document and build the model objects.

    Raises :class:`WorkoutFormatError` if ``config`` isn't an object or
    ``exercises`` isn't a list of objects.
    """
    if not isinstance(data, dict):
        raise WorkoutFormatError("workout document must be a JSON object")
    raw_config = data.get("config")
    raw_exercises = data.get("exercises")
    if not isinstance(raw_config, dict):
        raise WorkoutFormatError("'config' must be an object")
    if not isinstance(raw_exercises, list):
        raise WorkoutFormatError("'exercises' must be a list")
    for i, item in enumerate(raw_exercises):
        if not isinstance(item, dict):
            raise WorkoutFormatError(f"exercise #{i + 1} must be an object")

    config = Config.from_dict(raw_config)
    # Route through a sequence so duplicate ids get re-generated.
    sequence = ExerciseSequence([Exercise.from_dict(item) for item in raw_exercises])
    return config, sequence.to_list()


def loads_document(text: str) -> tuple[Config, list[Exercise]]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise WorkoutFormatError(f"invalid JSON: {exc.msg}") from exc
    return parse_document(data)


# ── files ─────────────────────────────────────────────────────────────────


def export_filename(today: date | None = None) -> str:
    today = today or date.today()
    return f"{EXPORT_PREFIX}-{today.isoformat()}.json"


def export_workout(
    config: Config,
    exercises: Iterable[Exercise],
    directory: Path,
    *,
    today: date | None = None,
) -> Path:
    """Write the workout to ``<directory>/tabata-workout-YYYY-MM-DD.json``."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(today)
    path.write_text(dumps_document(config, exercises) + "\n", encoding="utf-8")
    logger.info("Exported workout to %s", path)
    return path


def import_workout(path: Path) -> tuple[Config, list[Exercise]]:
    """Read a workout file.  I/O errors propagate; bad content raises
    :class:`WorkoutFormatError`."""
    text = Path(path).read_text(encoding="utf-8")
    config, exercises = loads_document(text)
    logger.info("Imported %d exercises from %s", len(exercises), path)
    return config, exercises
