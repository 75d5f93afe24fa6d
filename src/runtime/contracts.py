"""Protocols describing runtime-facing sinks and storage capabilities."""

from __future__ import annotations

from typing import Any, Protocol

from planner import History


class AudioCueSinkLike(Protocol):
    """Plays the start cue for a session kind (`work` or `break`)."""
    def play_cue(self, kind: str) -> None:
        ...


class HistoryRepositoryLike(Protocol):
    """Best-effort storage for the archived schedule history."""
    def load(self) -> History:
        ...

    def save(self, history: History) -> bool:
        ...

    def clear(self) -> bool:
        ...


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...
