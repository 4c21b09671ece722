"""Audit event emitters."""

import logging
from abc import ABC, abstractmethod
from typing import Iterable
from uuid import uuid4

from deploy_platform.core.events_model import AuditEvent
from deploy_platform.core.models import LogLevel, SystemLog


logger = logging.getLogger(__name__)


ALLOWED_EVENTS = {
    "network.created",
    "network.updated",
    "network.deleted",
    "network.status_changed",
    "network.validator_saved",
    "network.validator_removed",
    "user.created",
    "user.updated",
    "user.deleted",
    "user.password_reset",
    "system.service_restarted",
}

_LOG_LEVELS = {
    LogLevel.INFO: logging.INFO,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.ERROR: logging.ERROR,
    LogLevel.CRITICAL: logging.CRITICAL,
}


class EventEmitter(ABC):
    """Abstract event emitter."""

    @abstractmethod
    def emit(self, events: Iterable[AuditEvent]) -> None:
        """Emit one or more events."""
        pass


class SystemLogEmitter(EventEmitter):
    """Persists each event as a SystemLog record."""

    def __init__(self, log_repository):
        self._repo = log_repository

    def emit(self, events: Iterable[AuditEvent]) -> None:
        for event in events:
            if event.event_type not in ALLOWED_EVENTS:
                raise ValueError(f"Invalid event type: {event.event_type}")

            self._repo.create(
                SystemLog(
                    log_id=uuid4(),
                    level=event.level,
                    source=event.source,
                    message=event.message,
                    details=event.details,
                    user_id=event.user_id,
                    network_id=event.network_id,
                    timestamp=event.timestamp,
                )
            )


class LoggingEventEmitter(EventEmitter):
    """Writes events to the application log."""

    def emit(self, events: Iterable[AuditEvent]) -> None:
        for event in events:
            logger.log(
                _LOG_LEVELS[event.level],
                "[event] %s | %s", event.event_type, event.message,
            )


class MultiEventEmitter:
    """Fan-out to multiple emitters."""

    def __init__(self, emitters: Iterable[EventEmitter]):
        self._emitters = list(emitters)

    def emit(self, events: Iterable[AuditEvent]):
        """Emit to all emitters."""
        events = list(events)
        for emitter in self._emitters:
            emitter.emit(events)


class NullEventEmitter(EventEmitter):
    """No-op emitter (used when events are not needed)."""

    def emit(self, events: Iterable[AuditEvent]) -> None:
        pass
