"""Audit sink protocol and in-process implementations.

The engine reports mutations and access decisions as plain event strings
through an injected :class:`AuditSink`.  It never decides where those
strings go; that is the sink's concern.  A sink must not raise back into
the caller.

Example
-------
>>> sink = MemoryAuditSink()
>>> sink.record("Role created: guest")
>>> sink.messages
['Role created: guest']
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable


@runtime_checkable
class AuditSink(Protocol):
    """Anything with a ``record(message)`` method."""

    def record(self, message: str) -> None:
        """Record a single audit event message."""
        ...


class NullAuditSink:
    """Discards every message."""

    def record(self, message: str) -> None:
        return None

    def __repr__(self) -> str:
        return "NullAuditSink()"


class MemoryAuditSink:
    """Keeps audit messages in memory, in the order they were recorded.

    Useful for tests and for short-lived evaluators that want to inspect
    their own trail.
    """

    def __init__(self) -> None:
        self._messages: list[str] = []

    def record(self, message: str) -> None:
        self._messages.append(message)

    @property
    def messages(self) -> list[str]:
        """A copy of all recorded messages."""
        return list(self._messages)

    def last(self) -> str | None:
        """Return the most recent message, or ``None`` if nothing was recorded."""
        return self._messages[-1] if self._messages else None

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)


class LoggingAuditSink:
    """Forwards audit messages to a standard library logger.

    Parameters
    ----------
    logger_name:
        Name of the logger to write to (default ``"permiflow.audit"``).
    level:
        Logging level used for every message (default ``INFO``).
    """

    def __init__(
        self,
        logger_name: str = "permiflow.audit",
        level: int = logging.INFO,
    ) -> None:
        self._logger = logging.getLogger(logger_name)
        self._level = level

    def record(self, message: str) -> None:
        self._logger.log(self._level, "%s", message)
