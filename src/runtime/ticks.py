"""Tick handlers that publish countdown updates and play session start cues."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from planner import ClockReading, Session
from contracts.ui_protocol import STATE_ACTIVE, STATE_IDLE

from .contracts import AudioCueSinkLike
from .messages import session_status_message
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class TickDependencies:
    """Dependencies required for processing display and notification ticks."""
    audio_sink: Optional[AudioCueSinkLike]
    logger: logging.Logger
    ui: RuntimeUIPublisher
    sounds_enabled: Callable[[], bool]


class TickProcessor:
    """Handles tick side effects such as UI updates and start cues."""
    def __init__(self, dependencies: TickDependencies):
        self._dependencies = dependencies
        self._last_session_id: Optional[str] = None
        self._last_remaining: Optional[int] = None

    def reset(self) -> None:
        self._last_session_id = None
        self._last_remaining = None

    def handle_display_tick(self, reading: ClockReading) -> bool:
        """Publish the countdown when the active session or whole seconds change."""
        deps = self._dependencies
        session_id = reading.session.id if reading.session is not None else None
        if (
            session_id == self._last_session_id
            and reading.remaining_seconds == self._last_remaining
        ):
            return False

        session_changed = session_id != self._last_session_id
        self._last_session_id = session_id
        self._last_remaining = reading.remaining_seconds

        deps.ui.publish_session_update(reading)
        if session_changed:
            state = STATE_IDLE if reading.is_idle else STATE_ACTIVE
            deps.ui.publish_state(state, message=session_status_message(reading))
        return True

    def handle_due_sessions(self, sessions: tuple[Session, ...]) -> None:
        if not sessions:
            return
        deps = self._dependencies
        sounds_enabled = deps.sounds_enabled()
        deps.ui.publish_notification(sessions, sounds_enabled=sounds_enabled)
        if not sounds_enabled or deps.audio_sink is None:
            return

        for item in sessions:
            try:
                deps.audio_sink.play_cue(item.kind)
            except Exception as error:
                deps.logger.error("Start cue playback failed for %s: %s", item.id, error)
