"""Cue sound synthesis and playback using numpy + QSoundEffect.

All sounds are generated programmatically as WAV files.  Files are cached
to disk so later launches skip the synthesis step.

Sound names
-----------
- ``tick``    — short rising blip for the 3-2-1 countdown
- ``bell``    — inharmonic boxing-ring bell, "go!"
- ``whistle`` — falling coach's whistle, "rest"
- ``victory`` — C major arpeggio fanfare when the workout is done
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path
from typing import Callable

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_SUPPORT_DIR

logger = logging.getLogger(__name__)


# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

SOUND_NAMES = ("tick", "bell", "whistle", "victory")

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _timeline(duration_s: float) -> np.ndarray:
    return np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    return np.sin(2 * np.pi * freq * _timeline(duration_s))


def _triangle(freq: float, duration_s: float) -> np.ndarray:
    """Triangle wave in -1..1."""
    phase = (freq * _timeline(duration_s)) % 1.0
    return 4.0 * np.abs(phase - 0.5) - 1.0


def _chirp(
    f_start: float,
    f_end: float,
    duration_s: float,
    *,
    exponential: bool = False,
    shape: str = "sine",
) -> np.ndarray:
    """Oscillator whose pitch glides from *f_start* to *f_end*."""
    n = int(SAMPLE_RATE * duration_s)
    if exponential:
        freqs = np.geomspace(f_start, f_end, n)
    else:
        freqs = np.linspace(f_start, f_end, n)
    phase = np.cumsum(freqs) / SAMPLE_RATE
    if shape == "triangle":
        return 4.0 * np.abs((phase % 1.0) - 0.5) - 1.0
    return np.sin(2 * np.pi * phase)


def _exp_ramp(start: float, end: float, n: int) -> np.ndarray:
    """Exponential gain ramp; both ends must be > 0."""
    return np.geomspace(start, end, n)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_tick() -> bytes:
    """Countdown — 50 ms sine blip rising 800→1200 Hz."""
    duration = 0.05
    tone = _chirp(800.0, 1200.0, duration, exponential=True)
    env = _exp_ramp(0.3, 0.01, len(tone))
    # Pad with silence so QSoundEffect doesn't clip
    padded = np.concatenate([tone * env, np.zeros(int(SAMPLE_RATE * 0.03))])
    return _to_wav_bytes(padded)


def _generate_bell() -> bytes:
    """Work start — 400 Hz bell with inharmonic partials, 1.5 s decay."""
    duration = 1.5
    fundamental = 400.0
    ratios = (1.0, 2.5, 3.8, 6.2)
    n = int(SAMPLE_RATE * duration)
    mix = np.zeros(n)
    for i, ratio in enumerate(ratios):
        freq = fundamental * ratio
        tone = _triangle(freq, duration) if i == 0 else _sine(freq, duration)
        mix += tone * _exp_ramp(0.2 / (i + 1), 0.001, n)
    return _to_wav_bytes(mix)


def _generate_whistle() -> bytes:
    """Rest start — triangle whistle falling 1500→1200 Hz over 300 ms."""
    duration = 0.3
    tone = _chirp(1500.0, 1200.0, duration, shape="triangle")
    env = np.linspace(0.4, 0.01, len(tone))
    return _to_wav_bytes(tone * env)


def _generate_victory() -> bytes:
    """Workout complete — C5→E5→G5→C6, 100 ms apart, each ringing 2 s."""
    notes = [523.25, 659.25, 783.99, 1046.50]  # C5, E5, G5, C6
    stagger = 0.1
    ring = 2.0
    attack = int(SAMPLE_RATE * 0.05)
    step = int(SAMPLE_RATE * stagger)
    total = step * (len(notes) - 1) + int(SAMPLE_RATE * ring)
    mix = np.zeros(total)
    for i, freq in enumerate(notes):
        tone = _triangle(freq, ring)
        env = np.empty(len(tone))
        env[:attack] = np.linspace(0.0, 0.2, attack)
        env[attack:] = _exp_ramp(0.2, 0.001, len(tone) - attack)
        start = step * i
        mix[start:start + len(tone)] += tone * env
    return _to_wav_bytes(mix)


# Map sound names to generator functions
_GENERATORS: dict[str, Callable[[], bytes]] = {
    "tick": _generate_tick,
    "bell": _generate_bell,
    "whistle": _generate_whistle,
    "victory": _generate_victory,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Synthesises, caches and plays the cue sounds.

    Nothing touches the audio device until the first :meth:`play` — WAV
    files are written and ``QSoundEffect`` objects created on demand.
    :meth:`dispose` releases them again.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.set_volume(70)
        mgr.play("bell")
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._enabled = True
        self._volume = 0.7  # 0.0–1.0
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}
        self._loaded = False

    # ── public API ────────────────────────────────────────────────────

    def set_volume(self, level: int) -> None:
        """Set volume (0-100).  Updates all loaded effects."""
        self._volume = max(0, min(level, 100)) / 100.0
        for effect in self._effects.values():
            effect.setVolume(self._volume)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def play(self, name: str) -> None:
        """Play a sound by name.  No-op if disabled or name unknown."""
        if not self._enabled:
            return
        self.ensure_loaded()
        effect = self._effects.get(name)
        if effect is not None:
            effect.play()

    def ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._ensure_wav_files()
        self._load_effects()
        self._loaded = True

    def dispose(self) -> None:
        """Stop and release every loaded effect."""
        for effect in self._effects.values():
            effect.stop()
            effect.deleteLater()
        self._effects.clear()
        self._loaded = False

    @property
    def volume(self) -> int:
        """Current volume as 0-100 integer."""
        return round(self._volume * 100)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def loaded(self) -> bool:
        return self._loaded

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())
                logger.debug("Synthesised %s", path)

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self._volume)
                self._effects[name] = effect
