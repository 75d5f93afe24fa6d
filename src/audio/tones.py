"""Sine tone synthesis for work and break start cues."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .errors import AudioCueError

_FADE_SECONDS = 0.02


@dataclass(frozen=True)
class CueToneSpec:
    """Frequency, length, and loudness of one cue."""
    frequency_hz: float
    duration_seconds: float
    volume: float = 0.3


def build_cue_tone(spec: CueToneSpec, sample_rate_hz: int) -> np.ndarray:
    """Render a mono float32 sine tone with short linear fades at both ends."""
    if spec.frequency_hz <= 0 or spec.duration_seconds <= 0:
        raise AudioCueError("Cue tone needs a positive frequency and duration")
    if sample_rate_hz <= 0:
        raise AudioCueError("Sample rate must be greater than zero")

    sample_count = int(round(spec.duration_seconds * sample_rate_hz))
    if sample_count == 0:
        raise AudioCueError("Cue tone is shorter than one sample")

    t = np.arange(sample_count, dtype=np.float32) / np.float32(sample_rate_hz)
    wave = np.sin(2.0 * np.pi * spec.frequency_hz * t).astype(np.float32)

    fade = min(int(_FADE_SECONDS * sample_rate_hz), sample_count // 2)
    if fade > 0:
        ramp = np.linspace(0.0, 1.0, fade, dtype=np.float32)
        wave[:fade] *= ramp
        wave[-fade:] *= ramp[::-1]

    return wave * np.float32(max(0.0, min(1.0, spec.volume)))
