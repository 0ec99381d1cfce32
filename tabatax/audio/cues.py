"""Cue emitter: the boundary between the timer and the speakers.

The run controller only knows the :class:`CueEmitter` protocol.  The real
implementation, :class:`CuePlayer`, owns one sound manager and one speech
manager with an explicit lifecycle:

- created on first use (no audio device is opened at construction)
- ``resume()`` — call from a user gesture such as pressing Start
- ``dispose()`` — release Qt resources on shutdown

Audio problems are logged and swallowed here.  A broken sound card must
never stop the workout from advancing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from PyQt6.QtCore import QObject

from ..timer.state import CueKind, SpeechCategory
from .sounds import SoundManager
from .speech import SpeechManager

logger = logging.getLogger(__name__)


class CueEmitter(Protocol):
    def play(self, kind: CueKind) -> None: ...

    def speak(self, text: str, category: SpeechCategory) -> None: ...

    def suspend(self) -> None: ...

    def resume(self) -> None: ...

    def dispose(self) -> None: ...


class CuePlayer(QObject):
    """Sound + speech implementation of :class:`CueEmitter`."""

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
        volume: int = 70,
        sound_enabled: bool = True,
        speech_enabled: bool = True,
        speech_rate: float | None = None,
    ) -> None:
        super().__init__(parent)
        self._sounds_dir = sounds_dir
        self._volume = volume
        self._sound_enabled = sound_enabled
        self._speech_enabled = speech_enabled
        self._speech_rate = speech_rate
        self._sounds: SoundManager | None = None
        self._speech: SpeechManager | None = None
        self._suspended = False

    # ── lifecycle ─────────────────────────────────────────────────────

    @property
    def sounds(self) -> SoundManager:
        if self._sounds is None:
            self._sounds = SoundManager(self, sounds_dir=self._sounds_dir)
            self._sounds.set_volume(self._volume)
            self._sounds.set_enabled(self._sound_enabled)
        return self._sounds

    @property
    def speech(self) -> SpeechManager:
        if self._speech is None:
            kwargs = {}
            if self._speech_rate is not None:
                kwargs["rate"] = self._speech_rate
            self._speech = SpeechManager(self, **kwargs)
            self._speech.set_enabled(self._speech_enabled)
        return self._speech

    @property
    def suspended(self) -> bool:
        return self._suspended

    def suspend(self) -> None:
        self._suspended = True

    def resume(self) -> None:
        """Wake up after a user gesture and warm the sound cache."""
        self._suspended = False
        try:
            self.sounds.ensure_loaded()
        except Exception:
            logger.exception("Audio init failed")

    def dispose(self) -> None:
        if self._sounds is not None:
            self._sounds.dispose()
            self._sounds = None
        if self._speech is not None:
            self._speech.dispose()
            self._speech = None

    # ── CueEmitter ────────────────────────────────────────────────────

    def play(self, kind: CueKind) -> None:
        if self._suspended:
            return
        try:
            self.sounds.play(kind.value)
        except Exception:
            logger.exception("Audio play failed: %s", kind.value)

    def speak(self, text: str, category: SpeechCategory) -> None:
        if self._suspended:
            return
        try:
            self.speech.speak(text, category.value)
        except Exception:
            logger.exception("Speech failed: %r", text)
