"""Append-only JSONL audit sink.

Every audit message becomes one line ``{"timestamp", "session_id",
"message"}``.  The file is the durable counterpart of
:class:`~permiflow.audit.sink.MemoryAuditSink`, and several evaluators (or
several runs of the CLI) may share one file, each stamping its own session.

Writes are serialised with a ``threading.Lock``.  A failed write is logged
and dropped; it never propagates into the engine that emitted the event.

Example
-------
>>> from pathlib import Path
>>> audit = AuditLogger(Path("/tmp/permiflow_audit.jsonl"), session_id="demo")
>>> audit.record("Role created: guest")
>>> audit.tail(1)
['Role created: guest']
"""
from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class AuditLogger:
    """JSONL audit trail implementing the ``AuditSink`` protocol.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` file.  Parent directories are created on the
        first record.
    session_id:
        Stamped on every record written through this instance.  A random
        UUID is used if not supplied.
    """

    def __init__(self, log_path: Path, session_id: str | None = None) -> None:
        self._log_path = Path(log_path)
        self._session_id: str = session_id or str(uuid.uuid4())
        self._lock = threading.Lock()

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def session_id(self) -> str:
        return self._session_id

    def record(self, message: str) -> None:
        """Append ``message`` to the trail, stamped with time and session."""
        line = json.dumps(
            {
                "timestamp": datetime.now(tz=timezone.utc).isoformat(),
                "session_id": self._session_id,
                "message": message,
            }
        )
        try:
            with self._lock:
                self._log_path.parent.mkdir(parents=True, exist_ok=True)
                with self._log_path.open("a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
        except OSError:
            logger.warning(
                "Failed to write audit record to %s", self._log_path, exc_info=True
            )

    # ------------------------------------------------------------------
    # Reading the trail back
    # ------------------------------------------------------------------

    def records(self, session_id: str | None = None) -> list[dict[str, str]]:
        """Return the stored records, oldest first.

        Parameters
        ----------
        session_id:
            Restrict to one session.  ``None`` returns every session's
            records.
        """
        return [
            entry
            for entry in self._iter_records()
            if session_id is None or entry["session_id"] == session_id
        ]

    def messages(
        self, contains: str | None = None, session_id: str | None = None
    ) -> list[str]:
        """Return message texts, optionally only those containing ``contains``.

        ``messages(contains="does not exist")`` lists the checks made
        against unknown roles, for instance.
        """
        return [
            entry["message"]
            for entry in self.records(session_id)
            if contains is None or contains in entry["message"]
        ]

    def tail(self, n: int) -> list[str]:
        """Return the ``n`` most recent messages across all sessions."""
        if n <= 0:
            return []
        return self.messages()[-n:]

    def __len__(self) -> int:
        return sum(1 for _ in self._iter_records())

    def _iter_records(self) -> Iterator[dict[str, str]]:
        if not self._log_path.exists():
            return
        with self._lock:
            with self._log_path.open("r", encoding="utf-8") as fh:
                lines = fh.readlines()
        for line in lines:
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.debug("Skipping malformed audit line in %s", self._log_path)
                continue
            if isinstance(entry, dict) and "message" in entry:
                yield {
                    "timestamp": str(entry.get("timestamp", "")),
                    "session_id": str(entry.get("session_id", "")),
                    "message": str(entry["message"]),
                }
