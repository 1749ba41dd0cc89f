"""Joke submission, moderation and the trending sampler.

State machine::

    pending --approve--> approved   (terminal)
    pending --reject---> rejected   (terminal)

``moderate`` does not check the current status: deciding an already decided
joke overwrites the previous verdict, and racing decisions are
last-write-wins. Who may moderate is decided before this module is reached.
"""

from __future__ import annotations

import random
import uuid
from typing import Optional

from jokedrop.content.models import (
    AUTHOR_VISIBLE_STATUSES,
    Decision,
    Joke,
    JokeStatus,
    TrendingJoke,
    TrendingPolicy,
)
from jokedrop.errors import InvalidArgument, NotFound
from jokedrop.storage.base import AccountStore, ContentStore


class ModerationPipeline:
    """Owns the joke lifecycle and the visible/trending sets."""

    def __init__(
        self,
        jokes: ContentStore,
        accounts: AccountStore,
        policy: TrendingPolicy = TrendingPolicy.recent,
        max_length: int = 1000,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._jokes = jokes
        self._accounts = accounts
        self._policy = TrendingPolicy(policy)
        self._max_length = max_length
        self._rng = rng

    @property
    def policy(self) -> TrendingPolicy:
        return self._policy

    def submit(self, author: str, body: str) -> Joke:
        """Create a pending joke for *author*."""
        body = (body or "").strip()
        if not author or not body:
            raise InvalidArgument("Email and joke required")
        if len(body) > self._max_length:
            raise InvalidArgument(f"Joke is longer than {self._max_length} characters")
        joke = Joke(id=uuid.uuid4().hex, author=author, body=body)
        self._jokes.insert(joke)
        return joke

    def list_for_author(self, author: str) -> list[Joke]:
        """Pending and approved jokes of *author*, most recent first."""
        if not author:
            raise InvalidArgument("Email required")
        return self._jokes.find_by_author_and_statuses(author, AUTHOR_VISIBLE_STATUSES)

    def moderate(self, joke_id: str, decision: Decision | str, moderator: str = "") -> Joke:
        """Apply *decision* to the joke and return it."""
        try:
            decision = Decision(decision)
        except ValueError:
            raise InvalidArgument(f"Unknown decision '{decision}' (expected approve or reject)") from None
        updated = self._jokes.update_status(joke_id, decision.target_status, decided_by=moderator)
        if updated is None:
            raise NotFound(f"Joke '{joke_id}' not found")
        return updated

    def pending_queue(self) -> list[Joke]:
        """The moderation queue, oldest first."""
        return list(reversed(self._jokes.find_by_status(JokeStatus.pending)))

    def trending(self, sample_size: int = 5) -> list[TrendingJoke]:
        """Up to *sample_size* approved jokes labelled with their author's visible name."""
        if sample_size < 0:
            raise InvalidArgument("sample size must not be negative")
        jokes = self._jokes.find_by_status(
            JokeStatus.approved, limit=sample_size, order=self._policy, rng=self._rng
        )
        labels: dict[str, str] = {}
        results: list[TrendingJoke] = []
        for j in jokes:
            if j.author not in labels:
                author = self._accounts.find_by_identity(j.author)
                labels[j.author] = author.label() if author is not None else j.author
            results.append(TrendingJoke(id=j.id, body=j.body, author=j.author, name=labels[j.author]))
        return results
