"""Thread-safe holder for the current schedule and its per-session mutations."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from .constants import (
    REASON_UNCHANGED,
    REASON_UNKNOWN_SESSION,
    REASON_UPDATED,
    STATUS_COMPLETED,
    STATUS_INCOMPLETE,
    TOGGLEABLE_STATUSES,
)
from .models import Sequence, Session


def _replace_session(
    sequence: Sequence,
    target_id: str,
    update: Callable[[Session], Session],
) -> Sequence:
    for index, item in enumerate(sequence):
        if item.id != target_id:
            continue
        updated = update(item)
        if updated == item:
            return sequence
        return sequence[:index] + (updated,) + sequence[index + 1 :]
    return sequence


def toggle_status(sequence: Sequence, target_id: str) -> Sequence:
    """Flip `completed` and `incomplete`; `not-applicable` sessions are left alone."""

    def _toggle(item: Session) -> Session:
        if item.status not in TOGGLEABLE_STATUSES:
            return item
        next_status = (
            STATUS_INCOMPLETE if item.status == STATUS_COMPLETED else STATUS_COMPLETED
        )
        return item.evolve(status=next_status)

    return _replace_session(sequence, target_id, _toggle)


def increment_distraction(sequence: Sequence, target_id: str) -> Sequence:
    def _increment(item: Session) -> Session:
        if not item.is_work:
            return item
        return item.evolve(distraction_count=(item.distraction_count or 0) + 1)

    return _replace_session(sequence, target_id, _increment)


def decrement_distraction(sequence: Sequence, target_id: str) -> Sequence:
    def _decrement(item: Session) -> Session:
        count = item.distraction_count or 0
        if not item.is_work or count <= 0:
            return item
        return item.evolve(distraction_count=count - 1)

    return _replace_session(sequence, target_id, _decrement)


def rename_task(sequence: Sequence, target_id: str, new_name: str) -> Sequence:
    name = new_name.strip()
    if not name:
        return sequence
    return _replace_session(sequence, target_id, lambda item: item.evolve(task=name))


@dataclass(frozen=True)
class StoreSnapshot:
    """Immutable view of the schedule tagged with its generation counter."""
    generation: int
    sequence: Sequence

    def find(self, target_id: str) -> Optional[Session]:
        for item in self.sequence:
            if item.id == target_id:
                return item
        return None


@dataclass(frozen=True)
class MutationResult:
    """Result envelope returned after applying a store mutation."""
    accepted: bool
    reason: str
    snapshot: StoreSnapshot


class SessionStore:
    """Holds the current sequence; every change swaps in a new tuple."""

    def __init__(self, *, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("planner")
        self._lock = threading.Lock()
        self._generation = 0
        self._sequence: Sequence = ()

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def replace(self, sequence: Sequence) -> tuple[Sequence, StoreSnapshot]:
        """Swap in a freshly generated sequence and return the one it replaced."""
        with self._lock:
            previous = self._sequence
            self._sequence = tuple(sequence)
            self._generation += 1
            self._logger.info(
                "Schedule replaced: generation=%d sessions=%d",
                self._generation,
                len(self._sequence),
            )
            return previous, self._snapshot_locked()

    def toggle_status(self, target_id: str) -> MutationResult:
        return self._apply(target_id, lambda seq: toggle_status(seq, target_id))

    def increment_distraction(self, target_id: str) -> MutationResult:
        return self._apply(target_id, lambda seq: increment_distraction(seq, target_id))

    def decrement_distraction(self, target_id: str) -> MutationResult:
        return self._apply(target_id, lambda seq: decrement_distraction(seq, target_id))

    def rename_task(self, target_id: str, new_name: str) -> MutationResult:
        return self._apply(target_id, lambda seq: rename_task(seq, target_id, new_name))

    def _apply(
        self,
        target_id: str,
        mutate: Callable[[Sequence], Sequence],
    ) -> MutationResult:
        with self._lock:
            if not any(item.id == target_id for item in self._sequence):
                self._logger.debug("Ignoring mutation for unknown session: %s", target_id)
                return MutationResult(False, REASON_UNKNOWN_SESSION, self._snapshot_locked())

            updated = mutate(self._sequence)
            if updated is self._sequence:
                return MutationResult(False, REASON_UNCHANGED, self._snapshot_locked())

            self._sequence = updated
            return MutationResult(True, REASON_UPDATED, self._snapshot_locked())

    def _snapshot_locked(self) -> StoreSnapshot:
        return StoreSnapshot(generation=self._generation, sequence=self._sequence)

