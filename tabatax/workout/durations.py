"""Work/rest length resolution and whole-workout estimates.

Per-exercise overrides win over the global config.  The rest between sets
is never per-exercise: it always comes from ``Config.set_rest_duration``.
"""

from __future__ import annotations

from typing import Iterable

from .models import Config, Exercise


def resolve_work(exercise: Exercise | None, config: Config) -> int:
    """Seconds of work for *exercise*.  ``None`` → the global default."""
    if exercise is not None and exercise.custom_duration is not None:
        return exercise.custom_duration
    return config.work_duration


def resolve_rest(exercise: Exercise | None, config: Config) -> int:
    """Seconds of rest after *exercise*.  An explicit 0 override is honoured."""
    if exercise is not None and exercise.custom_rest is not None:
        return exercise.custom_rest
    return config.rest_duration


def circuit_duration(config: Config, exercises: Iterable[Exercise]) -> int:
    """One pass through the circuit, without a trailing rest."""
    items = list(exercises)
    total = 0
    for i, ex in enumerate(items):
        total += resolve_work(ex, config)
        if i < len(items) - 1:
            total += resolve_rest(ex, config)
    return total


def total_duration(config: Config, exercises: Iterable[Exercise]) -> int:
    """Estimated seconds for the whole workout (lead-in not included)."""
    items = list(exercises)
    if not items:
        return 0
    set_rests = max(0, config.num_sets - 1) * config.set_rest_duration
    return circuit_duration(config, items) * config.num_sets + set_rests


def format_time(seconds: int) -> str:
    """``m:ss`` — 130 → ``"2:10"``."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
