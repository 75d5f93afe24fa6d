class PlannerError(Exception):
    """Base exception for schedule planning."""


class ScheduleRequestError(PlannerError):
    """Raised when a schedule generation request fails validation."""


class HistoryPersistenceError(PlannerError):
    """Raised when the stored history cannot be decoded."""
