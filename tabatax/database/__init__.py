"""Database package."""

from .db import get_session, init_db
from .models import SavedWorkout
from .store import save_local, load_local, STORAGE_KEY

__all__ = ["get_session", "init_db", "SavedWorkout", "save_local", "load_local", "STORAGE_KEY"]
