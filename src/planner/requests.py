"""Validated schedule generation requests built from UI or config input."""

from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .constants import MAX_DURATION_MINUTES, MIN_DURATION_MINUTES
from .errors import ScheduleRequestError


@dataclass(frozen=True)
class ScheduleRequest:
    """Inputs accepted by `partitioner.generate` after validation."""
    start: str
    end: str
    work_minutes: float
    break_minutes: float
    tasks: str = ""
    sounds_enabled: bool = True


def parse_schedule_request(
    payload: Mapping[str, Any],
    *,
    defaults: Optional[ScheduleRequest] = None,
) -> ScheduleRequest:
    """Validate a raw request mapping, filling missing fields from `defaults`."""

    def pick(field: str) -> Any:
        if field in payload and payload[field] is not None:
            return payload[field]
        if defaults is not None:
            return getattr(defaults, field)
        raise ScheduleRequestError(f"{field} is required")

    work_minutes = _as_minutes(pick("work_minutes"), "work_minutes")
    if work_minutes <= 0:
        raise ScheduleRequestError("work_minutes must be greater than zero")
    _check_duration(work_minutes, "work_minutes")
    break_minutes = _as_minutes(pick("break_minutes"), "break_minutes")
    if break_minutes < 0:
        raise ScheduleRequestError("break_minutes must not be negative")
    if break_minutes:
        _check_duration(break_minutes, "break_minutes")

    tasks = payload.get("tasks", defaults.tasks if defaults else "")
    if isinstance(tasks, list) and all(isinstance(item, str) for item in tasks):
        tasks = "\n".join(tasks)
    if tasks is None:
        tasks = ""
    if not isinstance(tasks, str):
        raise ScheduleRequestError("tasks must be text or a list of strings")

    sounds_enabled = payload.get(
        "sounds_enabled",
        defaults.sounds_enabled if defaults else True,
    )
    if not isinstance(sounds_enabled, bool):
        raise ScheduleRequestError("sounds_enabled must be a boolean")

    return ScheduleRequest(
        start=_as_clock(pick("start"), "start"),
        end=_as_clock(pick("end"), "end"),
        work_minutes=work_minutes,
        break_minutes=break_minutes,
        tasks=tasks,
        sounds_enabled=sounds_enabled,
    )


def _as_clock(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise ScheduleRequestError(f"{field} must be a time of day (HH:MM)")
    text = value.strip()
    try:
        dt.time.fromisoformat(text)
    except ValueError as error:
        raise ScheduleRequestError(f"{field} must be a time of day (HH:MM)") from error
    return text


def _as_minutes(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise ScheduleRequestError(f"{field} must be a number")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError as error:
            raise ScheduleRequestError(f"{field} must be a number") from error
    if not isinstance(value, (int, float)) or not math.isfinite(value):
        raise ScheduleRequestError(f"{field} must be a number")
    return float(value)


def _check_duration(minutes: float, field: str) -> None:
    if minutes < MIN_DURATION_MINUTES:
        raise ScheduleRequestError(f"{field} must be at least one second")
    if minutes > MAX_DURATION_MINUTES:
        raise ScheduleRequestError(f"{field} must not exceed 24 hours")
