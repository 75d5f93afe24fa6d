"""Partition a day's time range into alternating work and break sessions."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from .constants import (
    BREAK_TASK_LABEL,
    KIND_BREAK,
    KIND_WORK,
    STATUS_INCOMPLETE,
    WORK_TASK_LABEL_TEMPLATE,
)
from .models import Sequence, Session, session_id


def parse_clock(value: str) -> dt.time:
    """Parse an `HH:MM` or `HH:MM:SS` time-of-day string."""
    return dt.time.fromisoformat(value.strip())


def parse_task_names(raw: str) -> list[str]:
    """Split newline-separated task names, dropping blank lines."""
    return [line.strip() for line in raw.splitlines() if line.strip()]


def resolve_range(
    start_clock: str,
    end_clock: str,
    *,
    today: Optional[dt.date] = None,
    tzinfo: Optional[dt.tzinfo] = None,
) -> tuple[dt.datetime, dt.datetime]:
    """Resolve clock strings against `today`, rolling the end past midnight if needed."""
    day = today or dt.date.today()
    start = dt.datetime.combine(day, parse_clock(start_clock), tzinfo=tzinfo)
    end = dt.datetime.combine(day, parse_clock(end_clock), tzinfo=tzinfo)
    if end <= start:
        end += dt.timedelta(days=1)
    return start, end


def partition(
    start: dt.datetime,
    end: dt.datetime,
    work: dt.timedelta,
    rest: dt.timedelta,
    task_names: list[str],
) -> Sequence:
    """Walk from `start` to `end` emitting work sessions and whole breaks.

    The final work session is clipped to `end`. A break that would run past
    `end` is dropped and ends the schedule. Zero-length breaks are skipped.
    Raises `ValueError` unless `work` is positive and `rest` non-negative.
    """
    if work <= dt.timedelta(0):
        raise ValueError(f"work length must be positive, got {work}")
    if rest < dt.timedelta(0):
        raise ValueError(f"break length must not be negative, got {rest}")

    sessions: list[Session] = []
    cursor = start
    ordinal = 1

    while cursor < end:
        work_end = min(cursor + work, end)
        if task_names:
            task = task_names[(ordinal - 1) % len(task_names)]
        else:
            task = WORK_TASK_LABEL_TEMPLATE.format(ordinal=ordinal)
        sessions.append(
            Session(
                id=session_id(KIND_WORK, ordinal, cursor),
                start_time=cursor,
                end_time=work_end,
                task=task,
                kind=KIND_WORK,
                status=STATUS_INCOMPLETE,
                distraction_count=0,
            )
        )
        cursor = work_end
        if cursor >= end:
            break

        break_end = cursor + rest
        if break_end > end:
            break
        if break_end > cursor:
            sessions.append(
                Session(
                    id=session_id(KIND_BREAK, ordinal, cursor),
                    start_time=cursor,
                    end_time=break_end,
                    task=BREAK_TASK_LABEL,
                    kind=KIND_BREAK,
                    status=STATUS_INCOMPLETE,
                )
            )
            cursor = break_end
        ordinal += 1

    return tuple(sessions)


def generate(
    start_clock: str,
    end_clock: str,
    work_minutes: float,
    break_minutes: float,
    task_names_raw: str,
    *,
    today: Optional[dt.date] = None,
    tzinfo: Optional[dt.tzinfo] = None,
) -> Sequence:
    """Build the day's schedule.

    Callers must ensure `work_minutes > 0`, `break_minutes >= 0`, and that both
    clock strings are well formed; malformed clocks raise `ValueError`.
    """
    start, end = resolve_range(start_clock, end_clock, today=today, tzinfo=tzinfo)
    return partition(
        start,
        end,
        dt.timedelta(minutes=work_minutes),
        dt.timedelta(minutes=break_minutes),
        parse_task_names(task_names_raw),
    )
