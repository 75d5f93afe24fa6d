"""Threaded websocket server that streams planner events and forwards UI commands."""

from __future__ import annotations

import asyncio
import logging
import threading
from http import HTTPStatus
from pathlib import Path
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

from websockets.asyncio.server import Server, ServerConnection, broadcast, serve
from websockets.datastructures import Headers
from websockets.exceptions import ConnectionClosed
from websockets.http11 import Request, Response

from contracts.ui_protocol import EVENT_HELLO, STATE_IDLE

from .config import HEALTHZ_PATH, INDEX_PATH, ROOT_PATH, UIServerConfig
from .events import StickyEventStore, make_event, parse_command
from .static_files import load_static_asset

CommandHandler = Callable[[dict[str, Any]], None]

_STARTUP_TIMEOUT_SECONDS = 5.0
_HTML = "text/html; charset=utf-8"
_TEXT = "text/plain; charset=utf-8"


def _http_response(status: HTTPStatus, body: bytes, content_type: str) -> Response:
    headers = Headers()
    headers["Content-Type"] = content_type
    headers["Content-Length"] = str(len(body))
    headers["Cache-Control"] = "no-store"
    return Response(status.value, status.phrase, headers, body)


class UIServer:
    """Serves the planner page and keeps every websocket client on the latest events.

    Schedule, history, session, error and state frames are remembered so a client
    that connects late gets them replayed right after the hello frame. Inbound
    frames that decode to a command mapping go to the registered handler on the
    server thread; the handler must hand them over to the runtime itself.
    """

    def __init__(
        self,
        config: UIServerConfig,
        logger: Optional[logging.Logger] = None,
        *,
        on_command: Optional[CommandHandler] = None,
    ):
        self._config = config
        self._logger = logger or logging.getLogger("ui_server")
        self._on_command = on_command
        self._sticky_events = StickyEventStore()
        index_html = Path(config.index_file).read_bytes()
        self._fixed_routes = {
            ROOT_PATH: (index_html, _HTML),
            INDEX_PATH: (index_html, _HTML),
            HEALTHZ_PATH: (b"ok\n", _TEXT),
        }
        self._thread: Optional[threading.Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._server: Optional[Server] = None
        self._shutdown: Optional[asyncio.Event] = None
        self._ready = threading.Event()
        self._failure: Optional[BaseException] = None

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def port(self) -> int:
        return self._config.port

    def set_command_handler(self, handler: Optional[CommandHandler]) -> None:
        self._on_command = handler

    def start(self) -> None:
        if self._thread is not None:
            self._logger.warning("UI server is already running")
            return

        self._failure = None
        self._ready.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="ui-server")
        self._thread.start()

        if not self._ready.wait(_STARTUP_TIMEOUT_SECONDS):
            raise RuntimeError("UI server did not start in time")
        if self._failure is not None:
            self._thread = None
            raise RuntimeError(f"UI server startup failed: {self._failure}")

    def stop(self) -> None:
        if self._thread is None:
            return
        if self._loop is not None and self._shutdown is not None:
            self._loop.call_soon_threadsafe(self._shutdown.set)
        self._thread.join(_STARTUP_TIMEOUT_SECONDS)
        if self._thread.is_alive():
            self._logger.error("UI server thread did not stop")
        self._thread = None

    def publish(self, event_type: str, **payload: Any) -> None:
        """Encode and broadcast one event; replayable types are also remembered."""
        message = make_event(event_type, **payload)
        self._sticky_events.remember(event_type, message)

        loop = self._loop
        if loop is None:
            return
        try:
            loop.call_soon_threadsafe(self._broadcast, message)
        except RuntimeError:
            # Loop already closed.
            return

    def _run(self) -> None:
        try:
            asyncio.run(self._serve())
        except Exception as error:
            self._failure = error
            self._logger.error("UI server failed: %s", error, exc_info=True)
        finally:
            self._loop = None
            self._server = None
            self._ready.set()

    async def _serve(self) -> None:
        self._shutdown = asyncio.Event()
        async with serve(
            self._serve_client,
            self._config.host,
            self._config.port,
            process_request=self._process_request,
            logger=self._logger,
        ) as server:
            self._server = server
            self._loop = asyncio.get_running_loop()
            self._logger.info(
                "UI server running at http://%s:%d (websocket: %s)",
                self._config.host,
                self._config.port,
                self._config.websocket_path,
            )
            self._ready.set()
            await self._shutdown.wait()

    async def _serve_client(self, websocket: ServerConnection) -> None:
        self._logger.info("Client connected: %s", websocket.remote_address)
        try:
            await websocket.send(
                make_event(EVENT_HELLO, state=STATE_IDLE, message="UI websocket connected")
            )
            for frame in self._sticky_events.snapshot():
                await websocket.send(frame)
            async for message in websocket:
                self._forward_command(message)
        except ConnectionClosed:
            self._logger.info("Client disconnected: %s", websocket.remote_address)

    def _forward_command(self, message: str | bytes) -> None:
        command = parse_command(message)
        if command is None:
            self._logger.warning("Ignoring malformed UI message: %.200r", message)
            return
        if self._on_command is None:
            return
        try:
            self._on_command(command)
        except Exception as error:
            self._logger.error("UI command handler failed: %s", error, exc_info=True)

    def _process_request(
        self,
        connection: ServerConnection,
        request: Request,
    ) -> Optional[Response]:
        """Answer plain HTTP requests; only the websocket path continues to the handshake."""
        path = urlsplit(request.path).path
        if path == self._config.websocket_path:
            return None

        route = self._fixed_routes.get(path)
        if route is not None:
            return _http_response(HTTPStatus.OK, *route)

        asset = load_static_asset(self._config.ui_root, path)
        if asset is not None:
            return _http_response(HTTPStatus.OK, asset.body, asset.content_type)
        return _http_response(HTTPStatus.NOT_FOUND, b"not found\n", _TEXT)

    def _broadcast(self, message: str) -> None:
        if self._server is not None:
            broadcast(self._server.connections, message)
