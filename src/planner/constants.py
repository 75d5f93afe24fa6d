"""Kind, status, label, and reason constants used by schedule planning logic."""

from __future__ import annotations

KIND_WORK = "work"
KIND_BREAK = "break"

STATUS_COMPLETED = "completed"
STATUS_INCOMPLETE = "incomplete"
STATUS_NOT_APPLICABLE = "not-applicable"

TOGGLEABLE_STATUSES: frozenset[str] = frozenset({STATUS_COMPLETED, STATUS_INCOMPLETE})

BREAK_TASK_LABEL = "Break"
WORK_TASK_LABEL_TEMPLATE = "Work session #{ordinal}"

DEFAULT_NOTIFICATION_TOLERANCE_SECONDS = 1.0

# Bounds for work and break lengths; a break may also be exactly zero.
MIN_DURATION_MINUTES = 1 / 60
MAX_DURATION_MINUTES = 24 * 60

HISTORY_CAPACITY = 30
HISTORY_STORAGE_KEY = "pomodoro-history"
DEFAULT_HISTORY_DATE_FORMAT = "%d %B %Y"

REASON_UPDATED = "updated"
REASON_UNCHANGED = "unchanged"
REASON_UNKNOWN_SESSION = "unknown_session"
REASON_REPLACED = "replaced"
