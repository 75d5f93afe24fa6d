"""Status and rejection text builders for schedule flows."""

from __future__ import annotations

from planner import ClockReading
from planner.constants import (
    KIND_WORK,
    REASON_UNCHANGED,
    REASON_UNKNOWN_SESSION,
)

REASON_INVALID_REQUEST = "invalid_request"
REASON_UNSUPPORTED_COMMAND = "unsupported_command"
REASON_MISSING_SESSION_ID = "missing_session_id"


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def session_status_message(reading: ClockReading) -> str:
    session = reading.session
    if session is None:
        return "No active session"
    remaining = format_duration(reading.remaining_seconds)
    if session.kind == KIND_WORK:
        return f"Working on '{session.task}' ({remaining} remaining)"
    return f"Break ({remaining} remaining)"


def command_rejection_text(command: str, reason: str) -> str:
    if reason == REASON_UNKNOWN_SESSION:
        return "That session is no longer part of the schedule."
    if reason == REASON_UNCHANGED:
        return "Nothing to change."
    if reason == REASON_MISSING_SESSION_ID:
        return f"'{command}' needs a session id."
    if reason == REASON_UNSUPPORTED_COMMAND:
        return f"Unsupported command: {command}"
    return f"Could not apply '{command}'."
