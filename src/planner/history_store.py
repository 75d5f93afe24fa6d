"""Best-effort JSON file persistence for the schedule history."""

from __future__ import annotations

import contextlib
import datetime as dt
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Mapping, Optional

from .constants import (
    HISTORY_STORAGE_KEY,
    KIND_BREAK,
    KIND_WORK,
    STATUS_COMPLETED,
    STATUS_INCOMPLETE,
    STATUS_NOT_APPLICABLE,
)
from .errors import HistoryPersistenceError
from .models import History, HistoryEntry, Session

_KINDS = frozenset({KIND_WORK, KIND_BREAK})
_STATUSES = frozenset({STATUS_COMPLETED, STATUS_INCOMPLETE, STATUS_NOT_APPLICABLE})


def session_to_payload(session: Session) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": session.id,
        "start_time": session.start_time.isoformat(),
        "end_time": session.end_time.isoformat(),
        "task": session.task,
        "kind": session.kind,
        "status": session.status,
    }
    if session.distraction_count is not None:
        payload["distraction_count"] = session.distraction_count
    return payload


def history_to_payload(history: History) -> list[dict[str, Any]]:
    """Convert history entries into JSON-ready dictionaries with ISO-8601 instants."""
    return [
        {
            "date": entry.date,
            "schedule": [session_to_payload(item) for item in entry.schedule],
        }
        for entry in history
    ]


def session_from_payload(raw: Any) -> Session:
    if not isinstance(raw, Mapping):
        raise HistoryPersistenceError("Session record must be an object.")

    kind = raw.get("kind")
    if kind not in _KINDS:
        raise HistoryPersistenceError(f"Unknown session kind: {kind!r}")
    status = raw.get("status", STATUS_INCOMPLETE)
    if status not in _STATUSES:
        raise HistoryPersistenceError(f"Unknown session status: {status!r}")

    distraction_count = raw.get("distraction_count")
    if distraction_count is not None and (
        not isinstance(distraction_count, int) or distraction_count < 0
    ):
        raise HistoryPersistenceError("distraction_count must be a non-negative integer.")

    return Session(
        id=_as_text(raw.get("id"), "id"),
        start_time=_as_instant(raw.get("start_time"), "start_time"),
        end_time=_as_instant(raw.get("end_time"), "end_time"),
        task=_as_text(raw.get("task"), "task"),
        kind=kind,
        status=status,
        distraction_count=distraction_count,
    )


def history_from_payload(payload: Any) -> History:
    """Rehydrate history entries; raises `HistoryPersistenceError` on bad shapes."""
    if not isinstance(payload, list):
        raise HistoryPersistenceError("History payload must be a list.")

    entries: list[HistoryEntry] = []
    for raw_entry in payload:
        if not isinstance(raw_entry, Mapping):
            raise HistoryPersistenceError("History entry must be an object.")
        schedule = raw_entry.get("schedule")
        if not isinstance(schedule, list):
            raise HistoryPersistenceError("History entry schedule must be a list.")
        entries.append(
            HistoryEntry(
                date=_as_text(raw_entry.get("date"), "date"),
                schedule=tuple(session_from_payload(item) for item in schedule),
            )
        )
    return tuple(entries)


class HistoryRepository:
    """Stores the history list under a fixed key in a JSON file."""

    def __init__(self, path: str | Path, *, logger: Optional[logging.Logger] = None):
        self._path = Path(path).expanduser()
        self._logger = logger or logging.getLogger("planner.history")

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> History:
        """Return the stored history, or an empty one when absent or unreadable."""
        if not self._path.exists():
            return ()

        try:
            with open(self._path, "r", encoding="utf-8") as fh:
                document = json.load(fh)
            if not isinstance(document, Mapping):
                raise HistoryPersistenceError("History document must be an object.")
            history = history_from_payload(document.get(HISTORY_STORAGE_KEY, []))
        except (OSError, ValueError, RecursionError, HistoryPersistenceError) as error:
            self._logger.warning(
                "Failed to load history from %s, starting empty: %s",
                self._path,
                error,
            )
            return ()

        self._logger.info("Loaded %d history entries from %s", len(history), self._path)
        return history

    def save(self, history: History) -> bool:
        document = {HISTORY_STORAGE_KEY: history_to_payload(history)}
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                dir=str(self._path.parent),
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, ensure_ascii=False, indent=2)
                os.replace(temp_name, self._path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(temp_name)
                raise
        except (OSError, TypeError, ValueError) as error:
            self._logger.error("Failed to save history to %s: %s", self._path, error)
            return False
        return True

    def clear(self) -> bool:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as error:
            self._logger.error("Failed to clear history at %s: %s", self._path, error)
            return False
        return True


def _as_text(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise HistoryPersistenceError(f"{field} must be a string.")
    return value


def _as_instant(value: Any, field: str) -> dt.datetime:
    text = _as_text(value, field)
    try:
        return dt.datetime.fromisoformat(text)
    except ValueError as error:
        raise HistoryPersistenceError(f"{field} is not an ISO-8601 instant: {text}") from error

