from .clock import ClockReading, active_session, read_clock, remaining
from .errors import HistoryPersistenceError, PlannerError, ScheduleRequestError
from .history import archive, clear, format_date_label
from .history_store import HistoryRepository, history_from_payload, history_to_payload
from .models import History, HistoryEntry, Sequence, Session, SessionKind, SessionStatus
from .notifications import NotificationGate, due_notifications
from .partitioner import generate, parse_task_names, resolve_range
from .requests import ScheduleRequest, parse_schedule_request
from .store import (
    MutationResult,
    SessionStore,
    StoreSnapshot,
    decrement_distraction,
    increment_distraction,
    rename_task,
    toggle_status,
)

__all__ = [
    "ClockReading",
    "History",
    "HistoryEntry",
    "HistoryPersistenceError",
    "HistoryRepository",
    "MutationResult",
    "NotificationGate",
    "PlannerError",
    "ScheduleRequest",
    "ScheduleRequestError",
    "Sequence",
    "Session",
    "SessionKind",
    "SessionStatus",
    "SessionStore",
    "StoreSnapshot",
    "active_session",
    "archive",
    "clear",
    "decrement_distraction",
    "due_notifications",
    "format_date_label",
    "generate",
    "history_from_payload",
    "history_to_payload",
    "increment_distraction",
    "parse_schedule_request",
    "parse_task_names",
    "read_clock",
    "remaining",
    "rename_task",
    "resolve_range",
    "toggle_status",
]
