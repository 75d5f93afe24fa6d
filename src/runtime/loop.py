"""Runtime orchestration loop for schedule commands, countdown ticks, and cues."""

from __future__ import annotations

import datetime as dt
import logging
import threading
import time
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Any, Callable, Optional

from app_config import AppConfig
from planner import (
    History,
    NotificationGate,
    ScheduleRequest,
    SessionStore,
    StoreSnapshot,
    archive,
    format_date_label,
    generate,
    read_clock,
)
from contracts.ui_protocol import EVENT_ERROR, STATE_ERROR

from .commands import CommandDependencies, CommandDispatcher, CommandResult
from .contracts import AudioCueSinkLike, HistoryRepositoryLike, UIServerLike
from .ticks import TickDependencies, TickProcessor
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime."""
    logger: logging.Logger
    app_config: AppConfig
    history_repository: Optional[HistoryRepositoryLike] = None
    audio_sink: Optional[AudioCueSinkLike] = None
    ui_server: Optional[UIServerLike] = None
    now_fn: Callable[[], dt.datetime] = dt.datetime.now
    monotonic_fn: Callable[[], float] = time.monotonic


class PlannerRuntime:
    """Owns the current schedule and history and drives both poll cadences."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._config = bootstrap.app_config
        self._now = bootstrap.now_fn
        self._monotonic = bootstrap.monotonic_fn

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        self._store = SessionStore(logger=logging.getLogger("planner"))
        self._gate = NotificationGate(
            tolerance=dt.timedelta(
                seconds=self._config.clock.notification_tolerance_seconds
            ),
            logger=logging.getLogger("planner"),
        )
        self._history: History = ()
        self._sounds_enabled = self._config.schedule.sounds_enabled
        self._commands: Queue[dict[str, Any]] = Queue()
        self._stop_requested = threading.Event()

        self._tick_processor = TickProcessor(
            TickDependencies(
                audio_sink=bootstrap.audio_sink,
                logger=self._logger,
                ui=self._ui,
                sounds_enabled=lambda: self._sounds_enabled,
            )
        )
        self._dispatcher = CommandDispatcher(
            CommandDependencies(
                store=self._store,
                logger=self._logger,
                ui=self._ui,
                default_request=self.default_request,
                regenerate=self.regenerate,
                clear_history=self.clear_history,
                sync=self.publish_sync,
            )
        )

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def history(self) -> History:
        return self._history

    @property
    def sounds_enabled(self) -> bool:
        return self._sounds_enabled

    def default_request(self) -> ScheduleRequest:
        settings = self._config.schedule
        return ScheduleRequest(
            start=settings.start,
            end=settings.end,
            work_minutes=settings.work_minutes,
            break_minutes=settings.break_minutes,
            tasks=settings.tasks,
            sounds_enabled=settings.sounds_enabled,
        )

    def load_history(self) -> History:
        repository = self._bootstrap.history_repository
        if repository is not None and self._config.history.enabled:
            self._history = repository.load()
        return self._history

    def regenerate(self, request: ScheduleRequest) -> StoreSnapshot:
        """Replace the schedule, archiving a non-empty previous one first."""
        now = self._now()
        sequence = generate(
            request.start,
            request.end,
            request.work_minutes,
            request.break_minutes,
            request.tasks,
            today=now.date(),
            tzinfo=now.tzinfo,
        )
        previous, snapshot = self._store.replace(sequence)
        self._gate.reset(snapshot.generation)
        self._tick_processor.reset()
        self._sounds_enabled = request.sounds_enabled

        if self._config.history.enabled:
            updated = archive(
                previous,
                format_date_label(now.date(), self._config.history.date_format),
                self._history,
                capacity=self._config.history.capacity,
            )
            if updated is not self._history:
                self._history = updated
                self._persist_history()
                self._ui.publish_history(self._history)

        self._logger.info(
            "Generated schedule %s-%s: %d sessions (work=%smin break=%smin)",
            request.start,
            request.end,
            len(snapshot.sequence),
            request.work_minutes,
            request.break_minutes,
        )
        self._ui.publish_schedule(snapshot)
        return snapshot

    def clear_history(self) -> None:
        self._history = ()
        repository = self._bootstrap.history_repository
        if repository is not None:
            repository.clear()
        self._logger.info("History cleared")
        self._ui.publish_history(self._history)

    def publish_sync(self) -> None:
        self._ui.publish_schedule(self._store.snapshot())
        self._ui.publish_history(self._history)
        self._tick_processor.reset()
        self.tick_display()

    def submit(self, command: dict[str, Any]) -> None:
        """Queue a command from any thread; it is applied on the loop thread."""
        self._commands.put(command)

    def dispatch(self, command: dict[str, Any]) -> CommandResult:
        return self._dispatcher.handle(command)

    def tick_display(self, now: Optional[dt.datetime] = None) -> None:
        snapshot = self._store.snapshot()
        reading = read_clock(snapshot.sequence, now or self._now())
        self._tick_processor.handle_display_tick(reading)

    def tick_notifications(self, now: Optional[dt.datetime] = None) -> None:
        snapshot = self._store.snapshot()
        due = self._gate.poll(snapshot, now or self._now())
        if not due:
            return
        if self._store.snapshot().generation != snapshot.generation:
            self._logger.debug("Dropping start cues for superseded schedule")
            return
        self._tick_processor.handle_due_sessions(due)

    def stop(self) -> None:
        self._stop_requested.set()

    def run(self) -> int:
        self.load_history()
        if self._config.schedule.generate_on_startup:
            self.regenerate(self.default_request())
        self.publish_sync()

        display_interval = self._config.clock.display_interval_seconds
        notification_interval = self._config.clock.notification_interval_seconds
        next_display = self._monotonic()
        next_notification = next_display

        try:
            while not self._stop_requested.is_set():
                now_mono = self._monotonic()
                if now_mono >= next_notification:
                    self.tick_notifications()
                    next_notification = now_mono + notification_interval
                if now_mono >= next_display:
                    self.tick_display()
                    next_display = now_mono + display_interval

                timeout = max(0.0, min(next_display, next_notification) - self._monotonic())
                self._drain_commands(timeout)

        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            self._ui.publish(
                EVENT_ERROR,
                state=STATE_ERROR,
                message=f"Runtime failed: {error}",
            )
            return 1
        finally:
            self._persist_history()

        self._logger.info("Runtime stopped.")
        return 0

    def _drain_commands(self, timeout: float) -> None:
        try:
            command = self._commands.get(timeout=timeout)
        except Empty:
            return

        while True:
            self.dispatch(command)
            try:
                command = self._commands.get_nowait()
            except Empty:
                return

    def _persist_history(self) -> None:
        repository = self._bootstrap.history_repository
        if repository is None or not self._config.history.enabled:
            return
        repository.save(self._history)
