"""JSON framing for outbound UI events and inbound UI commands."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import STICKY_EVENT_ORDER


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def make_event(
    event_type: str,
    *,
    now_fn: Optional[Callable[[], datetime]] = None,
    **payload: Any,
) -> str:
    """Encode one outbound frame; `type` and `timestamp` lead every event."""
    stamp = (now_fn or _utc_now)().isoformat()
    return json.dumps({"type": event_type, "timestamp": stamp, **payload})


def parse_command(message: str | bytes) -> Optional[dict[str, Any]]:
    """Decode an inbound frame into a command mapping, or None if malformed."""
    try:
        payload = json.loads(message)
    except (ValueError, RecursionError):
        return None
    if isinstance(payload, dict) and isinstance(payload.get("command"), str):
        return payload
    return None


class StickyEventStore:
    """Latest frame per replayable event type, kept in replay order."""

    def __init__(self, order: tuple[str, ...] = STICKY_EVENT_ORDER):
        self._frames: dict[str, Optional[str]] = dict.fromkeys(order)
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> bool:
        with self._lock:
            if event_type not in self._frames:
                return False
            self._frames[event_type] = message
            return True

    def snapshot(self) -> list[str]:
        with self._lock:
            return [frame for frame in self._frames.values() if frame is not None]
