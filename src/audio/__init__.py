"""Public exports for session start audio cues."""

from .errors import AudioCueError
from .tones import CueToneSpec, build_cue_tone

__all__ = [
    "AudioCueError",
    "CueToneSpec",
    "build_cue_tone",
]
