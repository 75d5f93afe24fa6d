"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

import datetime as dt
import math
from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    DEFAULT_HISTORY_FILE,
    AppConfig,
    AppConfigurationError,
    AudioSettings,
    ClockSettings,
    HistorySettings,
    ScheduleSettings,
    UIServerSettings,
)
from planner.constants import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        schedule=_parse_schedule_settings(_section(raw, "schedule")),
        clock=_parse_clock_settings(_section(raw, "clock")),
        history=_parse_history_settings(_section(raw, "history"), base_dir=base_dir),
        audio=_parse_audio_settings(_section(raw, "audio")),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir),
        source_file=source_file,
    )


def _parse_schedule_settings(section: Mapping[str, Any]) -> ScheduleSettings:
    work_minutes = _as_float(section.get("work_minutes", 25.0), "schedule.work_minutes")
    if work_minutes <= 0:
        raise AppConfigurationError("schedule.work_minutes must be greater than zero.")
    _check_duration(work_minutes, "schedule.work_minutes")
    break_minutes = _as_float(section.get("break_minutes", 5.0), "schedule.break_minutes")
    if break_minutes < 0:
        raise AppConfigurationError("schedule.break_minutes must not be negative.")
    if break_minutes:
        _check_duration(break_minutes, "schedule.break_minutes")

    return ScheduleSettings(
        start=_as_clock(section.get("start", "09:00"), "schedule.start"),
        end=_as_clock(section.get("end", "17:00"), "schedule.end"),
        work_minutes=work_minutes,
        break_minutes=break_minutes,
        tasks=_as_task_lines(section.get("tasks", ""), "schedule.tasks"),
        sounds_enabled=_as_bool(
            section.get("sounds_enabled", True),
            "schedule.sounds_enabled",
        ),
        generate_on_startup=_as_bool(
            section.get("generate_on_startup", False),
            "schedule.generate_on_startup",
        ),
    )


def _parse_clock_settings(section: Mapping[str, Any]) -> ClockSettings:
    return ClockSettings(
        display_interval_seconds=_as_positive_float(
            section.get("display_interval_seconds", 0.25),
            "clock.display_interval_seconds",
        ),
        notification_interval_seconds=_as_positive_float(
            section.get("notification_interval_seconds", 1.0),
            "clock.notification_interval_seconds",
        ),
        notification_tolerance_seconds=_as_positive_float(
            section.get("notification_tolerance_seconds", 1.0),
            "clock.notification_tolerance_seconds",
        ),
    )


def _parse_history_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> HistorySettings:
    history_file = _as_str(section.get("file", DEFAULT_HISTORY_FILE), "history.file")
    capacity = _as_int(section.get("capacity", 30), "history.capacity")
    if capacity < 1:
        raise AppConfigurationError("history.capacity must be at least 1.")
    return HistorySettings(
        enabled=_as_bool(section.get("enabled", True), "history.enabled"),
        file=_resolve_path(base_dir, history_file or DEFAULT_HISTORY_FILE),
        capacity=capacity,
        date_format=(
            _as_str(section.get("date_format", "%d %B %Y"), "history.date_format")
            or "%d %B %Y"
        ),
    )


def _parse_audio_settings(section: Mapping[str, Any]) -> AudioSettings:
    volume = _as_float(section.get("volume", 0.3), "audio.volume")
    if not 0.0 <= volume <= 1.0:
        raise AppConfigurationError("audio.volume must be in [0, 1].")
    sample_rate_hz = _as_int(section.get("sample_rate_hz", 44100), "audio.sample_rate_hz")
    if sample_rate_hz <= 0:
        raise AppConfigurationError("audio.sample_rate_hz must be greater than zero.")

    return AudioSettings(
        enabled=_as_bool(section.get("enabled", True), "audio.enabled"),
        output_device=(
            _as_int(section.get("output_device"), "audio.output_device")
            if "output_device" in section
            else None
        ),
        work_tone_hz=_as_positive_float(
            section.get("work_tone_hz", 880.0),
            "audio.work_tone_hz",
        ),
        break_tone_hz=_as_positive_float(
            section.get("break_tone_hz", 523.25),
            "audio.break_tone_hz",
        ),
        tone_seconds=_as_positive_float(
            section.get("tone_seconds", 0.6),
            "audio.tone_seconds",
        ),
        volume=volume,
        sample_rate_hz=sample_rate_hz,
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_clock(value: Any, field: str) -> str:
    if isinstance(value, dt.time):
        return value.isoformat(timespec="minutes")
    text = _as_str(value, field)
    try:
        dt.time.fromisoformat(text)
    except ValueError as error:
        raise AppConfigurationError(f"{field} must be a time of day (HH:MM).") from error
    return text


def _as_task_lines(value: Any, field: str) -> str:
    if isinstance(value, list):
        if not all(isinstance(item, str) for item in value):
            raise AppConfigurationError(f"{field} must be a string or a list of strings.")
        return "\n".join(value)
    if value is None or isinstance(value, str):
        return value or ""
    raise AppConfigurationError(f"{field} must be a string or a list of strings.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    if not isinstance(value, (int, float)):
        raise AppConfigurationError(f"{field} must be a float.")
    if not math.isfinite(value):
        raise AppConfigurationError(f"{field} must be a finite number.")
    return float(value)


def _check_duration(minutes: float, field: str) -> None:
    if not MIN_DURATION_MINUTES <= minutes <= MAX_DURATION_MINUTES:
        raise AppConfigurationError(f"{field} must be between one second and 24 hours.")


def _as_positive_float(value: Any, field: str) -> float:
    number = _as_float(value, field)
    if number <= 0:
        raise AppConfigurationError(f"{field} must be greater than zero.")
    return number


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
