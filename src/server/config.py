"""Validated settings for the planner UI server and its fixed routes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from app_config_schema import UIServerSettings

WEBSOCKET_PATH = "/ws"
ROOT_PATH = "/"
INDEX_PATH = "/index.html"
HEALTHZ_PATH = "/healthz"

BUNDLED_INDEX_FILE = Path(__file__).resolve().parents[2] / "web_ui" / "index.html"


class ServerConfigurationError(Exception):
    """Raised when the UI server settings cannot be served."""


@dataclass(frozen=True)
class UIServerConfig:
    """Bind address and page for the planner UI; the index is checked only when enabled."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = str(BUNDLED_INDEX_FILE)

    def __post_init__(self) -> None:
        problem = self._find_problem()
        if problem:
            raise ServerConfigurationError(problem)

    def _find_problem(self) -> str:
        if not self.host.strip():
            return "ui_server.host cannot be empty"
        if not 0 < self.port < 65536:
            return f"ui_server.port must be in [1, 65535], got: {self.port}"
        if self.enabled and not Path(self.index_file).is_file():
            return f"UI index file not found: {self.index_file}"
        return ""

    @property
    def websocket_path(self) -> str:
        return WEBSOCKET_PATH

    @property
    def ui_root(self) -> Path:
        return Path(self.index_file).resolve().parent

    @classmethod
    def from_settings(cls, settings: UIServerSettings) -> "UIServerConfig":
        """Fall back to the bundled `web_ui/index.html` when no page is configured."""
        return cls(
            enabled=settings.enabled,
            host=settings.host.strip(),
            port=settings.port,
            index_file=settings.index_file.strip() or str(BUNDLED_INDEX_FILE),
        )
