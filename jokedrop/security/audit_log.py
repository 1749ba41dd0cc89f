"""Audit trail for account, follow and moderation events.

Events are appended as newline-delimited JSON to one file per UTC day under
``<data_dir>/audit_logs/``. Without a directory the trail is kept in memory.
"""

from __future__ import annotations

import json
import threading
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional


@dataclass
class AuditEntry:
    """A single audit log entry."""

    id: str
    timestamp: str
    actor: str
    action: str  # register | follow | unfollow | moderate
    resource_type: str  # account | joke
    resource_id: str
    details: dict[str, Any] = field(default_factory=dict)


class AuditLogger:
    """Append-only audit log with simple filtering."""

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self._base_dir = Path(base_dir) if base_dir else None
        self._memory: list[AuditEntry] = []
        self._lock = threading.Lock()
        if self._base_dir is not None:
            self._base_dir.mkdir(parents=True, exist_ok=True)

    def _log_file_for_date(self, dt: datetime) -> Path:
        return self._base_dir / f"{dt.strftime('%Y-%m-%d')}.jsonl"

    def _read_all_entries(self) -> list[AuditEntry]:
        if self._base_dir is None:
            return list(self._memory)
        entries: list[AuditEntry] = []
        for path in sorted(self._base_dir.glob("*.jsonl")):
            for line in path.read_text(encoding="utf-8").splitlines():
                if line.strip():
                    entries.append(AuditEntry(**json.loads(line)))
        return entries

    def log_event(
        self,
        actor: str,
        action: str,
        resource_type: str,
        resource_id: str,
        details: Optional[dict[str, Any]] = None,
    ) -> AuditEntry:
        """Record an audit event and return the created entry."""
        now = datetime.now(timezone.utc)
        entry = AuditEntry(
            id=uuid.uuid4().hex[:16],
            timestamp=now.isoformat(),
            actor=actor,
            action=action,
            resource_type=resource_type,
            resource_id=resource_id,
            details=details or {},
        )
        with self._lock:
            if self._base_dir is None:
                self._memory.append(entry)
            else:
                with self._log_file_for_date(now).open("a", encoding="utf-8") as fh:
                    fh.write(json.dumps(asdict(entry)) + "\n")
        return entry

    def get_events(
        self,
        *,
        actor: Optional[str] = None,
        action: Optional[str] = None,
        resource_type: Optional[str] = None,
        limit: int = 200,
    ) -> list[AuditEntry]:
        """Return filtered audit events, newest first."""
        entries = self._read_all_entries()

        if actor:
            entries = [e for e in entries if e.actor == actor]
        if action:
            entries = [e for e in entries if e.action == action]
        if resource_type:
            entries = [e for e in entries if e.resource_type == resource_type]

        # Newest first; list order breaks timestamp ties
        entries = list(reversed(entries))
        entries.sort(key=lambda e: e.timestamp, reverse=True)
        return entries[:limit]
