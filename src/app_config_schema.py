"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEFAULT_CONFIG_FILE = "config.toml"
DEFAULT_HISTORY_FILE = "pomodoro-history.json"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class ScheduleSettings:
    """Default schedule request values from `[schedule]`."""
    start: str = "09:00"
    end: str = "17:00"
    work_minutes: float = 25.0
    break_minutes: float = 5.0
    tasks: str = ""
    sounds_enabled: bool = True
    generate_on_startup: bool = False


@dataclass(frozen=True)
class ClockSettings:
    """Poll cadence for the countdown display and start cues from `[clock]`."""
    display_interval_seconds: float = 0.25
    notification_interval_seconds: float = 1.0
    notification_tolerance_seconds: float = 1.0


@dataclass(frozen=True)
class HistorySettings:
    """History archive and storage settings from `[history]`."""
    enabled: bool = True
    file: str = ""
    capacity: int = 30
    date_format: str = "%d %B %Y"


@dataclass(frozen=True)
class AudioSettings:
    """Session start tone settings from `[audio]`."""
    enabled: bool = True
    output_device: Optional[int] = None
    work_tone_hz: float = 880.0
    break_tone_hz: float = 523.25
    tone_seconds: float = 0.6
    volume: float = 0.3
    sample_rate_hz: int = 44100


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    schedule: ScheduleSettings
    clock: ClockSettings
    history: HistorySettings
    audio: AudioSettings
    ui_server: UIServerSettings
    source_file: str
