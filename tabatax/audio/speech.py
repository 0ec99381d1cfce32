"""Spoken announcements via Qt's text-to-speech module.

Every announcement gets a random motivational phrase from its category
pool, e.g. ``speak("Burpees", "start")`` might say "Crush it! Burpees".
"""

from __future__ import annotations

import logging
import random

from PyQt6.QtCore import QObject

logger = logging.getLogger(__name__)


MOTIVATION: dict[str, tuple[str, ...]] = {
    "start": ("Let's go!", "Crush it!", "Push hard!", "Work!", "Begin!"),
    "rest": ("Recover.", "Breathe.", "Relax.", "Shake it out.", "Rest."),
    "complete": ("Workout complete. Great job!", "You did it!", "Awesome work!"),
}

PREFERRED_VOICES = ("Google US English", "Samantha")
DEFAULT_RATE = 0.1  # QTextToSpeech range is -1.0 .. 1.0


def compose_phrase(text: str | None, category: str, rng: random.Random | None = None) -> str:
    """Combine *text* with a motivational phrase from *category*.

    The phrase is used alone when *text* is empty or just repeats the
    category name ("Rest" in the rest pool).  Unknown categories return
    *text* unchanged.
    """
    options = MOTIVATION.get(category)
    if not options:
        return text or ""
    phrase = (rng or random).choice(options)
    if text and text.strip().lower() != category.lower():
        return f"{phrase} {text}"
    return phrase


class SpeechManager(QObject):
    """Lazily-created ``QTextToSpeech`` engine.

    The Qt engine is built on the first :meth:`speak`.  If the platform has
    no speech backend the manager logs once and stays silent.
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        rate: float = DEFAULT_RATE,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._rate = rate
        self._rng = rng or random.Random()
        self._engine = None
        self._unavailable = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def speak(self, text: str | None, category: str) -> str:
        """Say the composed phrase.  Returns what was (or would be) spoken."""
        phrase = compose_phrase(text, category, self._rng)
        if not self._enabled or not phrase:
            return phrase
        engine = self._ensure_engine()
        if engine is None:
            return phrase
        engine.stop()
        engine.say(phrase)
        return phrase

    def dispose(self) -> None:
        if self._engine is not None:
            self._engine.stop()
            self._engine.deleteLater()
            self._engine = None

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_engine(self):
        if self._engine is not None or self._unavailable:
            return self._engine
        try:
            from PyQt6.QtTextToSpeech import QTextToSpeech
        except ImportError:
            logger.warning("QtTextToSpeech not available; announcements disabled")
            self._unavailable = True
            return None

        engine = QTextToSpeech(self)
        engine.setRate(self._rate)
        voice = self._pick_voice(engine.availableVoices())
        if voice is not None:
            engine.setVoice(voice)
        self._engine = engine
        return engine

    @staticmethod
    def _pick_voice(voices):
        for voice in voices:
            if any(name in voice.name() for name in PREFERRED_VOICES):
                return voice
        for voice in voices:
            if voice.locale().name().startswith("en"):
                return voice
        return None
