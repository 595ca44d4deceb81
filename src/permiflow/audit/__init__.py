"""Audit collaborators for permiflow.

The engine emits event strings through an injected sink; the classes here
are ready-made sinks.
"""
from __future__ import annotations

from permiflow.audit.logger import AuditLogger
from permiflow.audit.sink import (
    AuditSink,
    LoggingAuditSink,
    MemoryAuditSink,
    NullAuditSink,
)

__all__ = [
    "AuditLogger",
    "AuditSink",
    "LoggingAuditSink",
    "MemoryAuditSink",
    "NullAuditSink",
]
