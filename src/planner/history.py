"""Bounded, most-recent-first archive of replaced schedules."""

from __future__ import annotations

import datetime as dt

from .constants import DEFAULT_HISTORY_DATE_FORMAT, HISTORY_CAPACITY
from .models import History, HistoryEntry, Sequence


def archive(
    previous: Sequence,
    date_label: str,
    history: History,
    *,
    capacity: int = HISTORY_CAPACITY,
) -> History:
    """Prepend `previous` under `date_label`, keeping at most `capacity` entries."""
    if not previous:
        return history
    entry = HistoryEntry(date=date_label, schedule=tuple(previous))
    return ((entry,) + tuple(history))[: max(0, capacity)]


def clear() -> History:
    return ()


def format_date_label(
    day: dt.date,
    date_format: str = DEFAULT_HISTORY_DATE_FORMAT,
) -> str:
    return day.strftime(date_format)
