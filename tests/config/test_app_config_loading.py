import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from app_config import (
    AppConfigurationError,
    default_app_config,
    load_app_config,
    resolve_config_path,
)


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class AppConfigLoadingTests(unittest.TestCase):
    def test_load_app_config_resolves_relative_paths(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            config_path = root / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [history]
                    file = "data/history.json"

                    [ui_server]
                    index_file = "web/index.html"
                    """
                ).strip(),
            )

            app_config = load_app_config(str(config_path))

            self.assertEqual(str(config_path), app_config.source_file)
            self.assertEqual(
                str((root / "data/history.json").resolve()),
                app_config.history.file,
            )
            self.assertEqual(
                str((root / "web/index.html").resolve()),
                app_config.ui_server.index_file,
            )

    def test_load_app_config_parses_schedule_section(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            _write_text(
                config_path,
                textwrap.dedent(
                    """
                    [schedule]
                    start = 08:30:00
                    end = "12:00"
                    work_minutes = 50
                    break_minutes = 10
                    tasks = ["Write", "Review"]
                    sounds_enabled = false
                    generate_on_startup = true

                    [clock]
                    notification_tolerance_seconds = 2.5
                    """
                ).strip(),
            )

            app_config = load_app_config(str(config_path))

            schedule = app_config.schedule
            self.assertEqual("08:30", schedule.start)
            self.assertEqual("12:00", schedule.end)
            self.assertEqual(50.0, schedule.work_minutes)
            self.assertEqual(10.0, schedule.break_minutes)
            self.assertEqual("Write\nReview", schedule.tasks)
            self.assertFalse(schedule.sounds_enabled)
            self.assertTrue(schedule.generate_on_startup)
            self.assertEqual(2.5, app_config.clock.notification_tolerance_seconds)

    def test_load_app_config_rejects_invalid_values(self) -> None:
        cases = {
            "[schedule]\nwork_minutes = 0\n": "schedule.work_minutes",
            "[schedule]\nwork_minutes = nan\n": "schedule.work_minutes",
            "[schedule]\nwork_minutes = 100000\n": "schedule.work_minutes",
            "[schedule]\nbreak_minutes = inf\n": "schedule.break_minutes",
            "[schedule]\nbreak_minutes = -1\n": "schedule.break_minutes",
            "[schedule]\nstart = \"nine\"\n": "schedule.start",
            "[history]\ncapacity = 0\n": "history.capacity",
            "[audio]\nvolume = 1.5\n": "audio.volume",
            "[clock]\ndisplay_interval_seconds = 0\n": "clock.display_interval_seconds",
            "schedule = 3\n": "[schedule]",
        }
        for content, field in cases.items():
            with self.subTest(field=field):
                with tempfile.TemporaryDirectory() as temp_dir:
                    config_path = Path(temp_dir) / "config.toml"
                    _write_text(config_path, content)

                    with self.assertRaises(AppConfigurationError) as context:
                        load_app_config(str(config_path))

                    self.assertIn(field, str(context.exception))

    def test_load_app_config_reports_missing_and_malformed_files(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            with self.assertRaises(AppConfigurationError):
                load_app_config(str(root / "missing.toml"))
            with self.assertRaises(AppConfigurationError):
                load_app_config(str(root))

            broken = root / "broken.toml"
            _write_text(broken, "[schedule\n")
            with self.assertRaises(AppConfigurationError) as context:
                load_app_config(str(broken))
            self.assertIn("Failed to parse config TOML", str(context.exception))

    def test_default_app_config_matches_documented_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            root = Path(temp_dir)
            app_config = default_app_config(root)

            self.assertEqual("", app_config.source_file)
            self.assertEqual("09:00", app_config.schedule.start)
            self.assertEqual(25.0, app_config.schedule.work_minutes)
            self.assertEqual(5.0, app_config.schedule.break_minutes)
            self.assertEqual(30, app_config.history.capacity)
            self.assertEqual(
                str((root / "pomodoro-history.json").resolve()),
                app_config.history.file,
            )
            self.assertIsNone(app_config.audio.output_device)
            self.assertEqual(8765, app_config.ui_server.port)

    def test_resolve_config_path_prefers_environment_variable(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            env_config = Path(temp_dir) / "custom.toml"

            with patch.dict(os.environ, {"APP_CONFIG_FILE": str(env_config)}):
                self.assertEqual(env_config, resolve_config_path())
                explicit = resolve_config_path(str(Path(temp_dir) / "other.toml"))

            self.assertEqual(Path(temp_dir) / "other.toml", explicit)

    def test_resolve_config_path_defaults_to_working_directory(self) -> None:
        with tempfile.TemporaryDirectory() as cwd_dir:
            cwd = Path(cwd_dir)

            with patch.dict(os.environ, {}, clear=True):
                with patch("app_config.Path.cwd", return_value=cwd):
                    resolved = resolve_config_path()

            self.assertEqual((cwd / "config.toml").resolve(), resolved)


if __name__ == "__main__":
    unittest.main()
