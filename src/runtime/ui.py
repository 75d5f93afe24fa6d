from __future__ import annotations

from typing import Any, Iterable, Optional

from planner import ClockReading, History, Session, StoreSnapshot, history_to_payload
from planner.history_store import session_to_payload
from contracts.ui_protocol import (
    EVENT_COMMAND,
    EVENT_HISTORY,
    EVENT_NOTIFICATION,
    EVENT_SCHEDULE,
    EVENT_SESSION,
    EVENT_STATE_UPDATE,
)

from .contracts import UIServerLike
from .messages import format_duration


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_state(
        self,
        state: str,
        *,
        message: Optional[str] = None,
        **payload: Any,
    ) -> None:
        if message:
            payload["message"] = message
        self.publish(EVENT_STATE_UPDATE, state=state, **payload)

    def publish_schedule(self, snapshot: StoreSnapshot) -> None:
        self.publish(
            EVENT_SCHEDULE,
            generation=snapshot.generation,
            sessions=[session_to_payload(item) for item in snapshot.sequence],
        )

    def publish_session_update(self, reading: ClockReading) -> None:
        payload: dict[str, Any] = {
            "active": not reading.is_idle,
            "session": (
                session_to_payload(reading.session) if reading.session is not None else None
            ),
            "remaining_seconds": reading.remaining_seconds,
            "remaining_text": format_duration(reading.remaining_seconds),
            "progress": round(reading.progress, 4),
        }
        self.publish(EVENT_SESSION, **payload)

    def publish_notification(self, sessions: Iterable[Session], *, sounds_enabled: bool) -> None:
        self.publish(
            EVENT_NOTIFICATION,
            sessions=[
                {"id": item.id, "kind": item.kind, "task": item.task} for item in sessions
            ],
            sounds_enabled=sounds_enabled,
        )

    def publish_history(self, history: History) -> None:
        self.publish(EVENT_HISTORY, entries=history_to_payload(history))

    def publish_command_result(
        self,
        command: str,
        *,
        accepted: bool,
        reason: str = "",
        session_id: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {"command": command, "accepted": accepted}
        if reason:
            payload["reason"] = reason
        if session_id:
            payload["session_id"] = session_id
        if message:
            payload["message"] = message
        self.publish(EVENT_COMMAND, **payload)
