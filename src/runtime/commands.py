"""Dispatcher that applies UI commands to the schedule runtime."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from planner import (
    MutationResult,
    ScheduleRequest,
    ScheduleRequestError,
    SessionStore,
    StoreSnapshot,
    parse_schedule_request,
)
from planner.constants import REASON_REPLACED, REASON_UPDATED
from contracts.ui_protocol import (
    COMMAND_CLEAR_HISTORY,
    COMMAND_DECREMENT_DISTRACTION,
    COMMAND_GENERATE,
    COMMAND_INCREMENT_DISTRACTION,
    COMMAND_SYNC,
    COMMAND_TOGGLE_STATUS,
    SESSION_COMMANDS,
)

from .messages import (
    REASON_INVALID_REQUEST,
    REASON_MISSING_SESSION_ID,
    REASON_UNSUPPORTED_COMMAND,
    command_rejection_text,
)
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class CommandResult:
    """Accept/reject envelope for one dispatched command."""
    command: str
    accepted: bool
    reason: str


@dataclass(frozen=True)
class CommandDependencies:
    """Runtime operations and collaborators the dispatcher drives."""
    store: SessionStore
    logger: logging.Logger
    ui: RuntimeUIPublisher
    default_request: Callable[[], ScheduleRequest]
    regenerate: Callable[[ScheduleRequest], StoreSnapshot]
    clear_history: Callable[[], None]
    sync: Callable[[], None]


class CommandDispatcher:
    """Routes generate, session mutation, and history commands."""
    def __init__(self, dependencies: CommandDependencies):
        self._dependencies = dependencies

    def handle(self, command: dict[str, Any]) -> CommandResult:
        name = command.get("command")
        if not isinstance(name, str):
            name = ""

        if name == COMMAND_GENERATE:
            return self._handle_generate(command)
        if name in SESSION_COMMANDS:
            return self._handle_session_command(name, command)
        if name == COMMAND_CLEAR_HISTORY:
            self._dependencies.clear_history()
            return self._accept(name, REASON_UPDATED)
        if name == COMMAND_SYNC:
            self._dependencies.sync()
            return CommandResult(name, True, REASON_UPDATED)

        self._dependencies.logger.warning("Unsupported UI command: %s", name or "<missing>")
        return self._reject(name or "<missing>", REASON_UNSUPPORTED_COMMAND)

    def _handle_generate(self, command: dict[str, Any]) -> CommandResult:
        deps = self._dependencies
        try:
            request = parse_schedule_request(command, defaults=deps.default_request())
        except ScheduleRequestError as error:
            deps.logger.info("Rejected schedule request: %s", error)
            return self._reject(COMMAND_GENERATE, REASON_INVALID_REQUEST, message=str(error))

        try:
            deps.regenerate(request)
        except (ValueError, OverflowError) as error:
            deps.logger.warning("Schedule generation failed for %s: %s", request, error)
            return self._reject(
                COMMAND_GENERATE,
                REASON_INVALID_REQUEST,
                message=f"Could not build a schedule: {error}",
            )
        return self._accept(COMMAND_GENERATE, REASON_REPLACED)

    def _handle_session_command(self, name: str, command: dict[str, Any]) -> CommandResult:
        store = self._dependencies.store
        session_id = command.get("id")
        if not isinstance(session_id, str) or not session_id:
            return self._reject(name, REASON_MISSING_SESSION_ID)

        result: MutationResult
        if name == COMMAND_TOGGLE_STATUS:
            result = store.toggle_status(session_id)
        elif name == COMMAND_INCREMENT_DISTRACTION:
            result = store.increment_distraction(session_id)
        elif name == COMMAND_DECREMENT_DISTRACTION:
            result = store.decrement_distraction(session_id)
        else:
            new_name = command.get("name")
            result = store.rename_task(session_id, new_name if isinstance(new_name, str) else "")

        if not result.accepted:
            return self._reject(name, result.reason, session_id=session_id)

        self._dependencies.ui.publish_schedule(result.snapshot)
        return self._accept(name, result.reason, session_id=session_id)

    def _accept(self, name: str, reason: str, **payload: Any) -> CommandResult:
        self._dependencies.ui.publish_command_result(name, accepted=True, reason=reason, **payload)
        return CommandResult(name, True, reason)

    def _reject(self, name: str, reason: str, **payload: Any) -> CommandResult:
        payload.setdefault("message", command_rejection_text(name, reason))
        self._dependencies.ui.publish_command_result(
            name,
            accepted=False,
            reason=reason,
            **payload,
        )
        return CommandResult(name, False, reason)
