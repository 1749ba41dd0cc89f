"""Storage interfaces consumed by the social graph and the moderation pipeline.

Any backend (file snapshot, document store, relational) can sit behind these
as long as ``add_follow_edge`` / ``remove_follow_edge`` mutate both accounts as
one atomic unit.
"""

from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from jokedrop.accounts.models import Account
from jokedrop.content.models import Joke, JokeStatus, TrendingPolicy


class AccountStore(ABC):
    """Persistence for accounts keyed by identity."""

    @abstractmethod
    def find_by_identity(self, email: str) -> Optional[Account]:
        """Return the account for *email*, or None."""

    @abstractmethod
    def create(self, account: Account) -> Account:
        """Persist a new account. Raises ``Conflict`` if the identity exists."""

    @abstractmethod
    def update(self, email: str, **fields: Any) -> Optional[Account]:
        """Set the given fields on an account. Returns the updated account or None."""

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """Return every account in registration order."""

    @abstractmethod
    def add_follow_edge(self, follower: str, target: str) -> None:
        """Atomically add *target* to follower.following and *follower* to target.followers."""

    @abstractmethod
    def remove_follow_edge(self, follower: str, target: str) -> None:
        """Atomically remove both sides of the follower -> target edge."""


class ContentStore(ABC):
    """Persistence for jokes keyed by opaque id."""

    @abstractmethod
    def insert(self, joke: Joke) -> str:
        """Persist a new joke, assigning its ``seq``. Returns the id."""

    @abstractmethod
    def find_by_id(self, joke_id: str) -> Optional[Joke]:
        """Return the joke with *joke_id*, or None."""

    @abstractmethod
    def find_by_author_and_statuses(
        self, author: str, statuses: Iterable[JokeStatus]
    ) -> list[Joke]:
        """Return the author's jokes in any of *statuses*, most recent first."""

    @abstractmethod
    def find_by_status(
        self,
        status: JokeStatus,
        limit: Optional[int] = None,
        order: TrendingPolicy = TrendingPolicy.recent,
        rng: Optional[random.Random] = None,
    ) -> list[Joke]:
        """Return up to *limit* jokes with *status*, selected by *order*."""

    @abstractmethod
    def update_status(
        self, joke_id: str, status: JokeStatus, decided_by: str = ""
    ) -> Optional[Joke]:
        """Overwrite a joke's status. Returns the updated joke or None."""
