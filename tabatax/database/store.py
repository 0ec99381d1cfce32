"""Save/load the current workout to the local keyed store.

One slot, one fixed key — the same document shape as file exports.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from sqlalchemy import select

from ..workout.document import dumps_document, loads_document
from ..workout.models import Config, Exercise
from .db import get_session
from .models import SavedWorkout

logger = logging.getLogger(__name__)

STORAGE_KEY = "tabataX-data"


def save_local(
    config: Config, exercises: Iterable[Exercise], *, key: str = STORAGE_KEY
) -> None:
    payload = dumps_document(config, exercises)
    with get_session() as db:
        record = db.scalars(select(SavedWorkout).where(SavedWorkout.key == key)).first()
        if record is None:
            db.add(SavedWorkout(key=key, payload=payload, saved_at=datetime.now()))
        else:
            record.payload = payload
            record.saved_at = datetime.now()
    logger.info("Workout saved under %r", key)


def load_local(*, key: str = STORAGE_KEY) -> tuple[Config, list[Exercise]] | None:
    """Return the saved workout, or ``None`` if nothing was saved.

    A corrupt payload raises :class:`~tabatax.workout.WorkoutFormatError`.
    """
    with get_session() as db:
        record = db.scalars(select(SavedWorkout).where(SavedWorkout.key == key)).first()
        payload = record.payload if record is not None else None
    if payload is None:
        return None
    return loads_document(payload)


def has_saved(*, key: str = STORAGE_KEY) -> bool:
    with get_session() as db:
        return db.scalars(select(SavedWorkout.id).where(SavedWorkout.key == key)).first() is not None
