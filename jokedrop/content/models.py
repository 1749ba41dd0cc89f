"""Data models for submitted jokes and their moderation lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class JokeStatus(str, Enum):
    """Lifecycle state of a joke: pending -> approved | rejected (both terminal)."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Decision(str, Enum):
    """A moderator's verdict on a joke."""

    approve = "approve"
    reject = "reject"

    @property
    def target_status(self) -> JokeStatus:
        return {
            Decision.approve: JokeStatus.approved,
            Decision.reject: JokeStatus.rejected,
        }[self]


class TrendingPolicy(str, Enum):
    """How the trending set is drawn from the approved jokes."""

    recent = "recent"  # most-recent-N, deterministic
    random = "random"  # uniform sample of N without replacement


# Statuses an author sees when listing their own jokes.
AUTHOR_VISIBLE_STATUSES: tuple[JokeStatus, ...] = (JokeStatus.pending, JokeStatus.approved)


@dataclass
class Joke:
    """A single submitted joke."""

    id: str
    author: str
    body: str
    status: JokeStatus = JokeStatus.pending
    created_at: str = ""
    seq: int = 0  # assigned by the store on insert
    decided_at: str = ""
    decided_by: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()
        if isinstance(self.status, str):
            self.status = JokeStatus(self.status)


@dataclass
class TrendingJoke:
    """An approved joke enriched with the author's display label."""

    id: str
    body: str
    author: str
    name: str
