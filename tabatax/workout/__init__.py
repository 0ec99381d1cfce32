"""Workout package."""

from .models import (
    Config,
    Exercise,
    ExerciseSequence,
    DEFAULT_EXERCISES,
    ICON_IDS,
)
from .durations import (
    resolve_work,
    resolve_rest,
    total_duration,
    format_time,
)
from .document import (
    WorkoutFormatError,
    to_document,
    parse_document,
    loads_document,
    export_workout,
    import_workout,
)

__all__ = [
    "Config",
    "Exercise",
    "ExerciseSequence",
    "DEFAULT_EXERCISES",
    "ICON_IDS",
    "resolve_work",
    "resolve_rest",
    "total_duration",
    "format_time",
    "WorkoutFormatError",
    "to_document",
    "parse_document",
    "loads_document",
    "export_workout",
    "import_workout",
]
