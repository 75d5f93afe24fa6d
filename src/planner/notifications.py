"""At-most-once start cues for sessions that have just begun."""

from __future__ import annotations

import datetime as dt
import logging
from typing import AbstractSet, Iterable, Optional

from .constants import DEFAULT_NOTIFICATION_TOLERANCE_SECONDS
from .models import Session
from .store import StoreSnapshot

DEFAULT_TOLERANCE = dt.timedelta(seconds=DEFAULT_NOTIFICATION_TOLERANCE_SECONDS)


def due_notifications(
    sequence: Iterable[Session],
    now: dt.datetime,
    already_notified: AbstractSet[str],
    tolerance: dt.timedelta = DEFAULT_TOLERANCE,
) -> frozenset[str]:
    """Return ids whose start lies within `[now - tolerance, now]` and were not yet cued.

    Starts older than the tolerance window are skipped rather than cued late.
    """
    due: set[str] = set()
    for item in sequence:
        if item.id in already_notified:
            continue
        elapsed = now - item.start_time
        if dt.timedelta(0) <= elapsed < tolerance:
            due.add(item.id)
    return frozenset(due)


class NotificationGate:
    """Owns the already-notified id set for one schedule generation."""

    def __init__(
        self,
        *,
        tolerance: dt.timedelta = DEFAULT_TOLERANCE,
        logger: Optional[logging.Logger] = None,
    ):
        if tolerance <= dt.timedelta(0):
            raise ValueError("tolerance must be greater than zero")
        self._tolerance = tolerance
        self._logger = logger or logging.getLogger("planner")
        self._generation: Optional[int] = None
        self._notified: set[str] = set()

    @property
    def notified(self) -> frozenset[str]:
        return frozenset(self._notified)

    def reset(self, generation: Optional[int] = None) -> None:
        self._generation = generation
        self._notified.clear()

    def poll(self, snapshot: StoreSnapshot, now: dt.datetime) -> tuple[Session, ...]:
        """Return sessions newly due at `now`, recording them as notified."""
        if snapshot.generation != self._generation:
            self.reset(snapshot.generation)

        due = due_notifications(snapshot.sequence, now, self._notified, self._tolerance)
        if not due:
            return ()

        self._notified.update(due)
        sessions = tuple(item for item in snapshot.sequence if item.id in due)
        for item in sessions:
            self._logger.info("Session started: id=%s kind=%s", item.id, item.kind)
        return sessions

    def is_current(self, snapshot: StoreSnapshot) -> bool:
        return snapshot.generation == self._generation
