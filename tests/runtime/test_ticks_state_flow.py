import datetime as dt
import logging
import unittest

from planner import generate, read_clock
from runtime.messages import format_duration, session_status_message
from runtime.ticks import TickDependencies, TickProcessor
from runtime.ui import RuntimeUIPublisher

DAY = dt.date(2026, 3, 2)


def _at(hour: int, minute: int, second: float = 0.0) -> dt.datetime:
    return dt.datetime.combine(DAY, dt.time(hour, minute)) + dt.timedelta(seconds=second)


class _UIServerStub:
    def __init__(self):
        self.events: list[tuple[str, dict[str, object]]] = []
        self.states: list[tuple[str, str | None, dict[str, object]]] = []
        self.trace: list[tuple[str, str]] = []

    def publish(self, event_type: str, **payload):
        if event_type == "state_update":
            state = payload.pop("state")
            self.states.append((state, payload.pop("message", None), payload))
            self.trace.append(("state", state))
            return
        self.events.append((event_type, payload))
        self.trace.append(("event", event_type))


class _AudioSinkStub:
    def __init__(self, error: Exception | None = None):
        self.kinds: list[str] = []
        self._error = error

    def play_cue(self, kind: str) -> None:
        self.kinds.append(kind)
        if self._error is not None:
            raise self._error


def _processor(ui, *, audio_sink=None, sounds_enabled=True) -> TickProcessor:
    return TickProcessor(
        TickDependencies(
            audio_sink=audio_sink,
            logger=logging.getLogger("test.ticks"),
            ui=RuntimeUIPublisher(ui),
            sounds_enabled=lambda: sounds_enabled,
        )
    )


class DisplayTickTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sequence = generate("09:00", "09:30", 25, 5, "Write", today=DAY)

    def test_session_start_publishes_update_then_active_state(self) -> None:
        ui = _UIServerStub()
        processor = _processor(ui)

        published = processor.handle_display_tick(read_clock(self.sequence, _at(9, 0, 0.2)))

        self.assertTrue(published)
        self.assertEqual([("event", "session"), ("state", "active")], ui.trace)
        payload = ui.events[0][1]
        self.assertTrue(payload["active"])
        self.assertEqual(1499, payload["remaining_seconds"])
        self.assertEqual("24:59", payload["remaining_text"])
        self.assertEqual("Working on 'Write' (24:59 remaining)", ui.states[0][1])

    def test_same_whole_second_is_published_once(self) -> None:
        ui = _UIServerStub()
        processor = _processor(ui)

        processor.handle_display_tick(read_clock(self.sequence, _at(9, 0, 0.2)))
        repeated = processor.handle_display_tick(read_clock(self.sequence, _at(9, 0, 0.7)))
        processor.handle_display_tick(read_clock(self.sequence, _at(9, 0, 1.2)))

        self.assertFalse(repeated)
        self.assertEqual(2, len([e for e in ui.events if e[0] == "session"]))
        self.assertEqual(1, len(ui.states))

    def test_schedule_end_publishes_idle_state(self) -> None:
        ui = _UIServerStub()
        processor = _processor(ui)

        processor.handle_display_tick(read_clock(self.sequence, _at(9, 29, 59)))
        processor.handle_display_tick(read_clock(self.sequence, _at(9, 30)))

        self.assertEqual(["active", "idle"], [state for state, _, _ in ui.states])
        self.assertEqual("No active session", ui.states[-1][1])
        self.assertIsNone(ui.events[-1][1]["session"])

    def test_reset_forces_next_publish(self) -> None:
        ui = _UIServerStub()
        processor = _processor(ui)
        reading = read_clock(self.sequence, _at(9, 0, 0.2))

        processor.handle_display_tick(reading)
        processor.reset()

        self.assertTrue(processor.handle_display_tick(reading))


class DueSessionTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sequence = generate("09:00", "09:30", 25, 5, "Write", today=DAY)

    def test_due_sessions_publish_notification_then_play_cue(self) -> None:
        ui = _UIServerStub()
        sink = _AudioSinkStub()

        _processor(ui, audio_sink=sink).handle_due_sessions(self.sequence[:1])

        self.assertEqual(["work"], sink.kinds)
        event_type, payload = ui.events[0]
        self.assertEqual("notification", event_type)
        self.assertTrue(payload["sounds_enabled"])
        self.assertEqual(
            [{"id": self.sequence[0].id, "kind": "work", "task": "Write"}],
            payload["sessions"],
        )

    def test_disabled_sounds_skip_cue_but_still_notify(self) -> None:
        ui = _UIServerStub()
        sink = _AudioSinkStub()

        _processor(ui, audio_sink=sink, sounds_enabled=False).handle_due_sessions(
            self.sequence[1:]
        )

        self.assertEqual([], sink.kinds)
        self.assertFalse(ui.events[0][1]["sounds_enabled"])

    def test_cue_failure_is_logged_and_remaining_cues_play(self) -> None:
        ui = _UIServerStub()
        sink = _AudioSinkStub(error=RuntimeError("device busy"))

        with self.assertLogs("test.ticks", level="ERROR") as logs:
            _processor(ui, audio_sink=sink).handle_due_sessions(self.sequence)

        self.assertEqual(["work", "break"], sink.kinds)
        self.assertEqual(2, len(logs.records))

    def test_no_sessions_is_a_no_op(self) -> None:
        ui = _UIServerStub()

        _processor(ui).handle_due_sessions(())

        self.assertEqual([], ui.events)


class MessageTests(unittest.TestCase):
    def test_format_duration(self) -> None:
        self.assertEqual("00:00", format_duration(-5))
        self.assertEqual("01:05", format_duration(65))
        self.assertEqual("90:00", format_duration(5400))

    def test_break_status_message(self) -> None:
        sequence = generate("09:00", "09:30", 25, 5, "", today=DAY)
        reading = read_clock(sequence, _at(9, 27))

        self.assertEqual("Break (03:00 remaining)", session_status_message(reading))


if __name__ == "__main__":
    unittest.main()
