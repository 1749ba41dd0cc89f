"""Opaque bearer-token sessions, stored alongside the accounts."""

from __future__ import annotations

import secrets
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jokedrop.storage.jsonfile import JsonCollection


@dataclass
class Session:
    """An issued login session."""

    id: str
    email: str
    token: str
    created_at: str = ""
    expires_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()


class SessionStore:
    """Issues, validates and revokes session tokens."""

    def __init__(self, collection: Optional[JsonCollection] = None, expires_in_hours: int = 24) -> None:
        self._sessions = collection if collection is not None else JsonCollection()
        self._expires_in_hours = expires_in_hours

    def create_session(self, email: str) -> Session:
        """Create a new session for *email*."""
        now = datetime.now(timezone.utc)
        session = Session(
            id=str(uuid.uuid4()),
            email=email,
            token=secrets.token_urlsafe(48),
            created_at=now.isoformat(),
            expires_at=(now + timedelta(hours=self._expires_in_hours)).isoformat(),
        )
        with self._sessions.transaction() as records:
            records[:] = [d for d in records if not _expired(d, session.created_at)]
            records.append({
                "id": session.id,
                "email": session.email,
                "token": session.token,
                "created_at": session.created_at,
                "expires_at": session.expires_at,
            })
        return session

    def validate_session(self, token: str) -> Optional[str]:
        """Return the identity behind *token*, or None if unknown or expired."""
        now = datetime.now(timezone.utc).isoformat()
        for d in self._sessions.snapshot():
            if d["token"] == token:
                if _expired(d, now):
                    # Expired -- clean it up
                    self.delete_session(token)
                    return None
                return d["email"]
        return None

    def delete_session(self, token: str) -> bool:
        with self._sessions.transaction() as records:
            remaining = [d for d in records if d["token"] != token]
            removed = len(remaining) < len(records)
            records[:] = remaining
        return removed


def _expired(record: dict, now: str) -> bool:
    return bool(record.get("expires_at")) and record["expires_at"] < now
