"""Audio package."""

from .cues import CueEmitter, CuePlayer
from .sounds import SoundManager, SOUND_NAMES
from .speech import SpeechManager, compose_phrase, MOTIVATION

__all__ = [
    "CueEmitter",
    "CuePlayer",
    "SoundManager",
    "SOUND_NAMES",
    "SpeechManager",
    "compose_phrase",
    "MOTIVATION",
]
