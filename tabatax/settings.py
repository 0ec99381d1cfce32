"""Application settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/TabataX/settings.json

Usage::

    settings = load_settings()
    settings.sound_volume = 50
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields
from pathlib import Path

logger = logging.getLogger(__name__)


APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "TabataX"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """User preferences that aren't part of a workout document."""

    # ── timer ─────────────────────────────────────────────────────────
    lead_in_seconds: int = 5

    # ── audio ─────────────────────────────────────────────────────────
    muted: bool = False
    sound_enabled: bool = True
    sound_volume: int = 70                 # 0-100
    speech_enabled: bool = True
    speech_rate: float = 0.1               # -1.0 .. 1.0

    # ── files ─────────────────────────────────────────────────────────
    export_dir: str | None = None          # None → ~/Downloads


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from disk, falling back to defaults."""
    path = path or SETTINGS_PATH
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(Settings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return Settings(**filtered)
    except (OSError, ValueError, TypeError, AttributeError):
        logger.warning("Ignoring unreadable settings file %s", path, exc_info=True)
    return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Write settings to disk as JSON."""
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(asdict(settings), indent=2) + "\n",
        encoding="utf-8",
    )


def default_export_dir(settings: Settings) -> Path:
    if settings.export_dir:
        return Path(settings.export_dir).expanduser()
    return Path.home() / "Downloads"
