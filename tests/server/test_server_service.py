import json
import logging
import tempfile
import unittest
from pathlib import Path

from websockets.datastructures import Headers
from websockets.http11 import Request

from server.config import UIServerConfig
from server.service import UIServer


class UIServerRoutingTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        root = Path(self._tmp.name)
        self.index = root / "index.html"
        self.index.write_text("<html>planner</html>", encoding="utf-8")
        (root / "app.js").write_text("console.log('ok');", encoding="utf-8")
        self.commands: list[dict[str, object]] = []
        self.server = UIServer(
            UIServerConfig(enabled=True, index_file=str(self.index)),
            logging.getLogger("test.ui_server"),
            on_command=self.commands.append,
        )

    def _get(self, path: str):
        request = Request(path, Headers())
        return self.server._process_request(None, request)

    def test_routes_index_health_and_assets(self) -> None:
        self.assertEqual(b"<html>planner</html>", self._get("/").body)
        self.assertEqual(b"<html>planner</html>", self._get("/index.html").body)
        self.assertEqual(b"ok\n", self._get("/healthz").body)
        self.assertEqual(b"console.log('ok');", self._get("/app.js?v=1").body)
        self.assertEqual(404, self._get("/missing.js").status_code)
        self.assertIsNone(self._get("/ws"))

    def test_publish_remembers_sticky_events_without_clients(self) -> None:
        self.server.publish("schedule", generation=1, sessions=[])
        self.server.publish("state_update", state="idle", message="No active session")
        self.server.publish("notification", sessions=[])

        replay = [json.loads(item) for item in self.server._sticky_events.snapshot()]

        self.assertEqual(["schedule", "state_update"], [item["type"] for item in replay])
        self.assertEqual("No active session", replay[1]["message"])

    def test_inbound_messages_are_forwarded_as_commands(self) -> None:
        self.server._forward_command('{"command": "toggle_status", "id": "work-1-0"}')

        with self.assertLogs("test.ui_server", level="WARNING"):
            self.server._forward_command("not json")

        self.assertEqual([{"command": "toggle_status", "id": "work-1-0"}], self.commands)

    def test_deeply_nested_frames_are_ignored(self) -> None:
        with self.assertLogs("test.ui_server", level="WARNING"):
            self.server._forward_command("[" * 200_000 + "]" * 200_000)

        self.assertEqual([], self.commands)

    def test_command_handler_errors_are_logged(self) -> None:
        def _fail(command):
            raise RuntimeError("boom")

        self.server.set_command_handler(_fail)

        with self.assertLogs("test.ui_server", level="ERROR"):
            self.server._forward_command('{"command": "sync"}')


if __name__ == "__main__":
    unittest.main()
