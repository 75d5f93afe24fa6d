"""Pure lookups for the session active at a given instant."""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import Session

_ZERO = dt.timedelta(0)


@dataclass(frozen=True)
class ClockReading:
    """Active session and countdown state for one poll tick."""
    session: Optional[Session]
    remaining: dt.timedelta
    progress: float

    @property
    def is_idle(self) -> bool:
        return self.session is None

    @property
    def remaining_seconds(self) -> int:
        return int(self.remaining.total_seconds())


def active_session(sequence: Iterable[Session], now: dt.datetime) -> Optional[Session]:
    """Return the session whose `[start, end)` window contains `now`."""
    for item in sequence:
        if item.start_time <= now < item.end_time:
            return item
    return None


def remaining(session: Session, now: dt.datetime) -> dt.timedelta:
    return max(_ZERO, session.end_time - now)


def read_clock(sequence: Iterable[Session], now: dt.datetime) -> ClockReading:
    session = active_session(sequence, now)
    if session is None:
        return ClockReading(session=None, remaining=_ZERO, progress=0.0)

    left = remaining(session, now)
    total = session.duration
    progress = (total - left) / total if total > _ZERO else 0.0
    return ClockReading(
        session=session,
        remaining=left,
        progress=max(0.0, min(1.0, progress)),
    )
