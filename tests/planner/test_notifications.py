import datetime as dt
import logging
import unittest

from planner import NotificationGate, StoreSnapshot, due_notifications, generate

DAY = dt.date(2026, 3, 2)


def _at(hour: int, minute: int, second: float = 0.0) -> dt.datetime:
    return dt.datetime.combine(DAY, dt.time(hour, minute)) + dt.timedelta(seconds=second)


class DueNotificationTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sequence = generate("09:00", "10:30", 25, 5, "", today=DAY)
        self.first_id = self.sequence[0].id

    def test_session_is_due_at_its_start(self) -> None:
        self.assertEqual(frozenset({self.first_id}), due_notifications(self.sequence, _at(9, 0), set()))

    def test_session_is_due_within_tolerance(self) -> None:
        self.assertEqual(
            frozenset({self.first_id}),
            due_notifications(self.sequence, _at(9, 0, 0.5), set()),
        )

    def test_session_is_not_due_before_start_or_after_tolerance(self) -> None:
        self.assertEqual(frozenset(), due_notifications(self.sequence, _at(8, 59, 59.5), set()))
        self.assertEqual(frozenset(), due_notifications(self.sequence, _at(9, 0, 1.0), set()))
        self.assertEqual(frozenset(), due_notifications(self.sequence, _at(9, 10), set()))

    def test_already_notified_sessions_are_excluded(self) -> None:
        self.assertEqual(
            frozenset(),
            due_notifications(self.sequence, _at(9, 0), {self.first_id}),
        )

    def test_wider_tolerance_catches_late_poll(self) -> None:
        due = due_notifications(
            self.sequence,
            _at(9, 0, 4.0),
            set(),
            tolerance=dt.timedelta(seconds=5),
        )
        self.assertEqual(frozenset({self.first_id}), due)


class NotificationGateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sequence = generate("09:00", "10:30", 25, 5, "", today=DAY)
        self.gate = NotificationGate(logger=logging.getLogger("test"))

    def test_each_session_fires_exactly_once_across_polls(self) -> None:
        snapshot = StoreSnapshot(generation=1, sequence=self.sequence)
        fired: list[str] = []
        now = _at(8, 59, 59)
        while now <= _at(10, 31):
            fired.extend(item.id for item in self.gate.poll(snapshot, now))
            now += dt.timedelta(seconds=0.25)

        self.assertEqual([item.id for item in self.sequence], fired)

    def test_repeated_poll_in_window_fires_once(self) -> None:
        snapshot = StoreSnapshot(generation=1, sequence=self.sequence)

        first = self.gate.poll(snapshot, _at(9, 0))
        second = self.gate.poll(snapshot, _at(9, 0, 0.5))

        self.assertEqual((self.sequence[0],), first)
        self.assertEqual((), second)
        self.assertEqual(frozenset({self.sequence[0].id}), self.gate.notified)

    def test_new_generation_resets_notified_set(self) -> None:
        self.gate.poll(StoreSnapshot(generation=1, sequence=self.sequence), _at(9, 0))

        replaced = StoreSnapshot(generation=2, sequence=self.sequence)
        self.assertFalse(self.gate.is_current(replaced))
        fired = self.gate.poll(replaced, _at(9, 0, 0.5))

        self.assertEqual((self.sequence[0],), fired)
        self.assertTrue(self.gate.is_current(replaced))

    def test_explicit_reset_clears_notified_set(self) -> None:
        snapshot = StoreSnapshot(generation=1, sequence=self.sequence)
        self.gate.poll(snapshot, _at(9, 0))

        self.gate.reset(1)

        self.assertEqual(frozenset(), self.gate.notified)
        self.assertEqual((self.sequence[0],), self.gate.poll(snapshot, _at(9, 0, 0.5)))

    def test_rejects_non_positive_tolerance(self) -> None:
        with self.assertRaises(ValueError):
            NotificationGate(tolerance=dt.timedelta(0))


if __name__ == "__main__":
    unittest.main()
