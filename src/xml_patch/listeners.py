"""EventListener implementations for merge notifications.

- ``LoggingListener`` forwards to the standard ``logging`` module.
- ``JsonEventListener`` writes one JSON object per line, suitable for a UI
  that renders merge problems.
- ``CollectingListener`` keeps notifications in memory (tests, callers that
  want to inspect errors).
- ``TeeListener`` fans one notification out to several listeners.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from xml_patch.protocols import EventListener

__all__ = [
    "CollectingListener",
    "JsonEventListener",
    "LoggingListener",
    "Notification",
    "Severity",
    "TeeListener",
]


class Severity(StrEnum):
    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()

    @property
    def logging_level(self) -> int:
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


@dataclass(frozen=True, slots=True)
class Notification:
    severity: Severity
    template: str
    args: tuple[object, ...]

    @property
    def message(self) -> str:
        return self.template.format(*self.args)


class LoggingListener:
    """Renders notifications through a ``logging.Logger``."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger if logger is not None else logging.getLogger("xml_patch")

    def event(self, severity: Severity, template: str, *args: object) -> None:
        level = severity.logging_level
        if self._logger.isEnabledFor(level):
            self._logger.log(level, template.format(*args))


class JsonEventListener:
    """Writes each notification as a JSON line to ``stream``."""

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream

    def event(self, severity: Severity, template: str, *args: object) -> None:
        record = {
            "severity": str(severity),
            "message": template.format(*args),
            "template": template,
            "args": [str(arg) for arg in args],
        }
        self._stream.write(json.dumps(record) + "\n")


@dataclass
class CollectingListener:
    notifications: list[Notification] = field(default_factory=list)

    def event(self, severity: Severity, template: str, *args: object) -> None:
        self.notifications.append(Notification(severity, template, args))

    def messages(self, severity: Severity | None = None) -> list[str]:
        return [
            n.message
            for n in self.notifications
            if severity is None or n.severity is severity
        ]


class TeeListener:
    """Forwards every notification to each registered listener in order."""

    def __init__(self, *listeners: EventListener) -> None:
        self._listeners: list[EventListener] = list(listeners)

    def add_listener(self, listener: EventListener) -> None:
        self._listeners.append(listener)

    def event(self, severity: Severity, template: str, *args: object) -> None:
        for listener in self._listeners:
            listener.event(severity, template, *args)
