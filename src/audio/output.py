"""Sounddevice-backed playback for session start cues."""

import logging
from typing import Optional

import numpy as np
import sounddevice as sd

from .errors import AudioCueError
from .tones import CueToneSpec, build_cue_tone


class SoundDeviceCuePlayer:
    """Plays a pre-rendered tone per session kind through a sounddevice output."""
    def __init__(
        self,
        tones: dict[str, CueToneSpec],
        *,
        sample_rate_hz: int = 44100,
        output_device_index: Optional[int] = None,
        blocksize: int = 1024,
        logger: Optional[logging.Logger] = None,
    ):
        self._sample_rate_hz = sample_rate_hz
        self._output_device_index = output_device_index
        self._blocksize = blocksize
        self._logger = logger or logging.getLogger("audio")
        self._buffers = {
            kind: build_cue_tone(spec, sample_rate_hz) for kind, spec in tones.items()
        }

    @classmethod
    def from_settings(
        cls,
        settings,
        logger: Optional[logging.Logger] = None,
    ) -> "SoundDeviceCuePlayer":
        tones = {
            "work": CueToneSpec(
                frequency_hz=settings.work_tone_hz,
                duration_seconds=settings.tone_seconds,
                volume=settings.volume,
            ),
            "break": CueToneSpec(
                frequency_hz=settings.break_tone_hz,
                duration_seconds=settings.tone_seconds,
                volume=settings.volume,
            ),
        }
        return cls(
            tones,
            sample_rate_hz=settings.sample_rate_hz,
            output_device_index=settings.output_device,
            logger=logger,
        )

    def play_cue(self, kind: str) -> None:
        wav = self._buffers.get(kind)
        if wav is None:
            raise AudioCueError(f"No cue configured for session kind: {kind}")
        self._logger.debug("Playing %s cue", kind)
        self.play(wav, blocking=False)

    def play(self, wav: np.ndarray, blocking: bool = True) -> None:
        if wav.ndim != 1:
            raise AudioCueError("Expected mono PCM array for playback")
        if len(wav) == 0:
            raise AudioCueError("Cannot play empty audio buffer")

        try:
            sd.play(
                wav,
                samplerate=self._sample_rate_hz,
                device=self._output_device_index,
                blocksize=self._blocksize,
                blocking=blocking,
            )
        except Exception as error:
            raise AudioCueError(f"Audio playback failed: {error}") from error
