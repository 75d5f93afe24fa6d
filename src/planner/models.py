"""Immutable session and history records shared by planner components."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, replace
from typing import Literal, Optional

from .constants import KIND_WORK, STATUS_INCOMPLETE

SessionKind = Literal["work", "break"]
SessionStatus = Literal["completed", "incomplete", "not-applicable"]


@dataclass(frozen=True)
class Session:
    """One scheduled work or break interval."""
    id: str
    start_time: dt.datetime
    end_time: dt.datetime
    task: str
    kind: SessionKind
    status: SessionStatus = STATUS_INCOMPLETE
    distraction_count: Optional[int] = None

    @property
    def is_work(self) -> bool:
        return self.kind == KIND_WORK

    @property
    def duration(self) -> dt.timedelta:
        return self.end_time - self.start_time

    def evolve(self, **changes) -> "Session":
        return replace(self, **changes)


Sequence = tuple[Session, ...]


@dataclass(frozen=True)
class HistoryEntry:
    """Archived schedule stored under the date it was replaced on."""
    date: str
    schedule: Sequence


History = tuple[HistoryEntry, ...]


def session_id(kind: str, ordinal: int, start_time: dt.datetime) -> str:
    """Build a reproducible session id from kind, ordinal, and start instant."""
    start_ms = int(round(start_time.timestamp() * 1000))
    return f"{kind}-{ordinal}-{start_ms}"
