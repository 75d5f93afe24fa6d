"""Web UI websocket event, state, and command constants."""

from __future__ import annotations

# Websocket event types
EVENT_HELLO = "hello"
EVENT_STATE_UPDATE = "state_update"
EVENT_SCHEDULE = "schedule"
EVENT_SESSION = "session"
EVENT_NOTIFICATION = "notification"
EVENT_HISTORY = "history"
EVENT_COMMAND = "command"
EVENT_ERROR = "error"

# UI runtime states
STATE_IDLE = "idle"
STATE_ACTIVE = "active"
STATE_ERROR = "error"

# Inbound commands
COMMAND_GENERATE = "generate"
COMMAND_TOGGLE_STATUS = "toggle_status"
COMMAND_INCREMENT_DISTRACTION = "increment_distraction"
COMMAND_DECREMENT_DISTRACTION = "decrement_distraction"
COMMAND_RENAME_TASK = "rename_task"
COMMAND_CLEAR_HISTORY = "clear_history"
COMMAND_SYNC = "sync"

SESSION_COMMANDS: frozenset[str] = frozenset(
    {
        COMMAND_TOGGLE_STATUS,
        COMMAND_INCREMENT_DISTRACTION,
        COMMAND_DECREMENT_DISTRACTION,
        COMMAND_RENAME_TASK,
    }
)

# Event types replayed to new clients, latest frame each, in this order.
STICKY_EVENT_ORDER: tuple[str, ...] = (
    EVENT_SCHEDULE,
    EVENT_HISTORY,
    EVENT_SESSION,
    EVENT_ERROR,
    EVENT_STATE_UPDATE,
)
