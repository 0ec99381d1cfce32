"""Workout data model: global config, exercises and the ordered circuit.

Numbers coming from forms or JSON files are never rejected.  Anything that
isn't a usable non-negative integer is coerced (``"20"`` → 20, ``-5`` → 0,
``"abc"`` → 0) so a half-filled editor can't crash the timer.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Iterator


# ── constants ─────────────────────────────────────────────────────────────

ICON_IDS = (
    "dumbbell",
    "running",
    "cardio",
    "hiit",
    "yoga",
    "stretch",
    "bike",
    "swim",
    "core",
)
DEFAULT_ICON = "dumbbell"
DEFAULT_EXERCISE_NAME = "New Exercise"


# ── coercion helpers ──────────────────────────────────────────────────────


def _to_int(value: Any) -> int | None:
    """Best-effort integer parse.  ``None`` when *value* isn't numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return None
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            try:
                return _to_int(float(text))
            except ValueError:
                return None
    return None


def coerce_count(value: Any) -> int:
    """Non-negative integer or 0."""
    parsed = _to_int(value)
    if parsed is None or parsed < 0:
        return 0
    return parsed


def coerce_custom_duration(value: Any) -> int | None:
    """Positive override or ``None`` (zero means "use the default")."""
    parsed = _to_int(value)
    if parsed is None or parsed <= 0:
        return None
    return parsed


def coerce_custom_rest(value: Any) -> int | None:
    """Non-negative override or ``None``.  An explicit 0 is kept."""
    parsed = _to_int(value)
    if parsed is None:
        return None
    return max(0, parsed)


def new_exercise_id() -> str:
    return uuid.uuid4().hex[:9]


# ── config ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Config:
    """Global timings.  All values in seconds except ``num_sets``."""

    work_duration: int = 20
    rest_duration: int = 10
    set_rest_duration: int = 30
    num_sets: int = 3

    def __post_init__(self) -> None:
        for name in ("work_duration", "rest_duration", "set_rest_duration", "num_sets"):
            object.__setattr__(self, name, coerce_count(getattr(self, name)))

    def to_dict(self) -> dict[str, int]:
        return {
            "workDuration": self.work_duration,
            "restDuration": self.rest_duration,
            "setRestDuration": self.set_rest_duration,
            "numSets": self.num_sets,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        """Build from the camelCase document shape.  Missing keys → 0."""
        return cls(
            work_duration=data.get("workDuration"),
            rest_duration=data.get("restDuration"),
            set_rest_duration=data.get("setRestDuration"),
            num_sets=data.get("numSets"),
        )


# ── exercise ──────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Exercise:
    id: str = field(default_factory=new_exercise_id)
    name: str = DEFAULT_EXERCISE_NAME
    notes: str = ""
    custom_duration: int | None = None
    custom_rest: int | None = None
    icon: str = DEFAULT_ICON

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", str(self.id) if self.id else new_exercise_id())
        object.__setattr__(self, "name", "" if self.name is None else str(self.name))
        object.__setattr__(self, "notes", "" if self.notes is None else str(self.notes))
        object.__setattr__(
            self, "custom_duration", coerce_custom_duration(self.custom_duration)
        )
        object.__setattr__(self, "custom_rest", coerce_custom_rest(self.custom_rest))
        if self.icon not in ICON_IDS:
            object.__setattr__(self, "icon", DEFAULT_ICON)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "notes": self.notes,
            "customDuration": self.custom_duration,
            "customRest": self.custom_rest,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Exercise:
        return cls(
            id=data.get("id") or "",
            name=data.get("name", DEFAULT_EXERCISE_NAME),
            notes=data.get("notes", ""),
            custom_duration=data.get("customDuration"),
            custom_rest=data.get("customRest"),
            icon=data.get("icon", DEFAULT_ICON),
        )


DEFAULT_EXERCISES: tuple[Exercise, ...] = (
    Exercise(id="1", name="Burpees", notes="Explode up!", icon="hiit"),
    Exercise(id="2", name="Mtn Climbers", notes="Drive knees", icon="running"),
    Exercise(
        id="3", name="Plank", notes="Tight core",
        custom_duration=45, custom_rest=15, icon="core",
    ),
)


# ── sequence ──────────────────────────────────────────────────────────────


class ExerciseSequence:
    """Ordered circuit of exercises addressed by stable id.

    Order defines the circuit.  Ids are unique: inserting an exercise whose
    id is already taken gives it a freshly generated one.
    """

    def __init__(self, exercises: list[Exercise] | tuple[Exercise, ...] = ()) -> None:
        self._items: list[Exercise] = []
        for ex in exercises:
            self.append(ex)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Exercise:
        return self._items[index]

    def __bool__(self) -> bool:
        return bool(self._items)

    @property
    def ids(self) -> list[str]:
        return [ex.id for ex in self._items]

    def to_list(self) -> list[Exercise]:
        return list(self._items)

    def index_of(self, exercise_id: str | None) -> int | None:
        if exercise_id is None:
            return None
        for i, ex in enumerate(self._items):
            if ex.id == exercise_id:
                return i
        return None

    def get(self, exercise_id: str | None) -> Exercise | None:
        idx = self.index_of(exercise_id)
        return None if idx is None else self._items[idx]

    def at(self, index: int) -> Exercise | None:
        """Exercise at *index*, or ``None`` when out of range."""
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def append(self, exercise: Exercise) -> Exercise:
        if self.index_of(exercise.id) is not None:
            exercise = replace(exercise, id=new_exercise_id())
        self._items.append(exercise)
        return exercise

    def remove(self, exercise_id: str) -> Exercise | None:
        idx = self.index_of(exercise_id)
        if idx is None:
            return None
        return self._items.pop(idx)

    def update(self, exercise_id: str, **changes: Any) -> Exercise | None:
        """Replace fields of one exercise.  The id itself can't change."""
        idx = self.index_of(exercise_id)
        if idx is None:
            return None
        changes.pop("id", None)
        updated = replace(self._items[idx], **changes)
        self._items[idx] = updated
        return updated

    def move(self, exercise_id: str, new_index: int) -> bool:
        """Reorder: move one exercise to *new_index* (clamped)."""
        idx = self.index_of(exercise_id)
        if idx is None:
            return False
        item = self._items.pop(idx)
        new_index = max(0, min(new_index, len(self._items)))
        self._items.insert(new_index, item)
        return True
