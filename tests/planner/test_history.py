import datetime as dt
import unittest

from planner import HistoryEntry, archive, clear, format_date_label, generate

DAY = dt.date(2026, 3, 2)


class HistoryArchiveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.sequence = generate("09:00", "10:00", 25, 5, "", today=DAY)

    def test_empty_previous_leaves_history_unchanged(self) -> None:
        history = (HistoryEntry(date="01 March 2026", schedule=self.sequence),)

        self.assertIs(history, archive((), "02 March 2026", history))

    def test_archive_prepends_most_recent(self) -> None:
        history = archive(self.sequence, "01 March 2026", ())
        history = archive(self.sequence, "02 March 2026", history)

        self.assertEqual(["02 March 2026", "01 March 2026"], [entry.date for entry in history])
        self.assertEqual(self.sequence, history[0].schedule)

    def test_archive_keeps_thirty_entries(self) -> None:
        history = ()
        for index in range(1, 32):
            history = archive(self.sequence, f"day-{index}", history)

        self.assertEqual(30, len(history))
        self.assertEqual("day-31", history[0].date)
        self.assertEqual("day-2", history[-1].date)

    def test_archive_honours_custom_capacity(self) -> None:
        history = ()
        for index in range(5):
            history = archive(self.sequence, f"day-{index}", history, capacity=2)

        self.assertEqual(["day-4", "day-3"], [entry.date for entry in history])

    def test_clear_returns_empty_history(self) -> None:
        self.assertEqual((), clear())

    def test_format_date_label(self) -> None:
        self.assertEqual("2026-10-16", format_date_label(dt.date(2026, 10, 16), "%Y-%m-%d"))
        self.assertIn("2026", format_date_label(dt.date(2026, 10, 16)))


if __name__ == "__main__":
    unittest.main()
