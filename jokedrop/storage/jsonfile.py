"""File-based JSON storage for accounts and jokes.

Each collection is a JSON list of dicts under the data directory
(``accounts.json``, ``jokes.json``, ``sessions.json``). Without a path the
same collection lives purely in memory, which is what the tests and the
``memory`` storage backend use.
"""

from __future__ import annotations

import copy
import json
import os
import random
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from jokedrop.accounts.models import Account, Privacy, Role
from jokedrop.config import Settings
from jokedrop.content.models import Joke, JokeStatus, TrendingPolicy
from jokedrop.errors import Conflict, InvalidArgument, NotFound
from jokedrop.storage.base import AccountStore, ContentStore

# Account fields that may be set through ``AccountStore.update``. Follow edges
# are deliberately absent: they only change through the edge methods.
_UPDATABLE_ACCOUNT_FIELDS = frozenset(
    {"password_hash", "name", "location", "dob", "profile_picture", "privacy", "role"}
)


class JsonCollection:
    """A list of records guarded by a re-entrant lock.

    ``transaction()`` hands out a working copy of the records and commits it
    in one write when the block exits cleanly. File-backed collections are
    written through a temp file and ``os.replace`` so a reader never sees a
    half-written file.
    """

    def __init__(self, path: Optional[str | Path] = None) -> None:
        self._path = Path(path) if path else None
        self._lock = threading.RLock()
        self._records: list[dict] = []
        if self._path is not None:
            self._path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def path(self) -> Optional[Path]:
        return self._path

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _load(self) -> list[dict]:
        if self._path is None:
            return copy.deepcopy(self._records)
        if not self._path.exists():
            return []
        data = json.loads(self._path.read_text(encoding="utf-8"))
        return data if isinstance(data, list) else []

    def _store(self, records: list[dict]) -> None:
        if self._path is None:
            self._records = records
            return
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(json.dumps(records, indent=2, default=str), encoding="utf-8")
        os.replace(tmp, self._path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def snapshot(self) -> list[dict]:
        """Return a private copy of every record."""
        with self._lock:
            return self._load()

    @contextmanager
    def transaction(self) -> Iterator[list[dict]]:
        """Yield the mutable record list; commit once if the block does not raise."""
        with self._lock:
            records = self._load()
            yield records
            self._store(records)


def open_collection(settings: Settings, filename: str) -> JsonCollection:
    """Return the collection *filename* for the configured storage backend."""
    if settings.storage == "memory":
        return JsonCollection()
    return JsonCollection(settings.data_dir / filename)


def _find(records: list[dict], key: str, value: str) -> Optional[dict]:
    for d in records:
        if d.get(key) == value:
            return d
    return None


# ===================================================================
# Accounts
# ===================================================================


class JsonAccountStore(AccountStore):
    """Account store backed by a :class:`JsonCollection`."""

    def __init__(self, collection: Optional[JsonCollection] = None) -> None:
        self._accounts = collection if collection is not None else JsonCollection()

    @staticmethod
    def _account_from_dict(d: dict) -> Account:
        role_val = d.get("role", "member")
        try:
            role_val = Role(role_val)
        except ValueError:
            role_val = Role.member
        privacy = d.get("privacy") or {}
        return Account(
            email=d["email"],
            password_hash=d.get("password_hash", ""),
            name=d.get("name", ""),
            location=d.get("location", ""),
            dob=d.get("dob", ""),
            profile_picture=d.get("profile_picture", ""),
            privacy=Privacy(
                name=privacy.get("name", True),
                location=privacy.get("location", True),
                dob=privacy.get("dob", False),
            ),
            followers=list(d.get("followers", [])),
            following=list(d.get("following", [])),
            role=role_val,
            created_at=d.get("created_at", ""),
        )

    @staticmethod
    def _account_to_dict(a: Account) -> dict:
        return {
            "email": a.email,
            "password_hash": a.password_hash,
            "name": a.name,
            "location": a.location,
            "dob": a.dob,
            "profile_picture": a.profile_picture,
            "privacy": {
                "name": a.privacy.name,
                "location": a.privacy.location,
                "dob": a.privacy.dob,
            },
            "followers": list(a.followers),
            "following": list(a.following),
            "role": a.role.value if isinstance(a.role, Role) else a.role,
            "created_at": a.created_at,
        }

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def find_by_identity(self, email: str) -> Optional[Account]:
        d = _find(self._accounts.snapshot(), "email", email)
        return self._account_from_dict(d) if d is not None else None

    def create(self, account: Account) -> Account:
        with self._accounts.transaction() as records:
            if _find(records, "email", account.email) is not None:
                raise Conflict("User already exists")
            records.append(self._account_to_dict(account))
        return account

    def update(self, email: str, **fields: Any) -> Optional[Account]:
        unknown = set(fields) - _UPDATABLE_ACCOUNT_FIELDS
        if unknown:
            raise InvalidArgument(f"Cannot update account field(s): {', '.join(sorted(unknown))}")
        with self._accounts.transaction() as records:
            d = _find(records, "email", email)
            if d is None:
                return None
            for key, value in fields.items():
                if isinstance(value, Privacy):
                    value = {"name": value.name, "location": value.location, "dob": value.dob}
                elif isinstance(value, Role):
                    value = value.value
                d[key] = value
            return self._account_from_dict(d)

    def list_accounts(self) -> list[Account]:
        return [self._account_from_dict(d) for d in self._accounts.snapshot()]

    # ------------------------------------------------------------------
    # Follow edges
    # ------------------------------------------------------------------

    def _edge_pair(self, records: list[dict], follower: str, target: str) -> tuple[dict, dict]:
        f = _find(records, "email", follower)
        if f is None:
            raise NotFound(f"User '{follower}' not found")
        t = _find(records, "email", target)
        if t is None:
            raise NotFound(f"User '{target}' not found")
        return f, t

    def add_follow_edge(self, follower: str, target: str) -> None:
        with self._accounts.transaction() as records:
            f, t = self._edge_pair(records, follower, target)
            following = f.setdefault("following", [])
            if target not in following:
                following.append(target)
            followers = t.setdefault("followers", [])
            if follower not in followers:
                followers.append(follower)

    def remove_follow_edge(self, follower: str, target: str) -> None:
        with self._accounts.transaction() as records:
            f, t = self._edge_pair(records, follower, target)
            f["following"] = [e for e in f.get("following", []) if e != target]
            t["followers"] = [e for e in t.get("followers", []) if e != follower]


# ===================================================================
# Jokes
# ===================================================================


class JsonContentStore(ContentStore):
    """Joke store backed by a :class:`JsonCollection`.

    Recency is the store-assigned ``seq``, so ordering is stable even when two
    jokes share a timestamp.
    """

    def __init__(self, collection: Optional[JsonCollection] = None) -> None:
        self._jokes = collection if collection is not None else JsonCollection()

    @staticmethod
    def _joke_from_dict(d: dict) -> Joke:
        return Joke(
            id=d["id"],
            author=d["author"],
            body=d["body"],
            status=JokeStatus(d.get("status", "pending")),
            created_at=d.get("created_at", ""),
            seq=d.get("seq", 0),
            decided_at=d.get("decided_at", ""),
            decided_by=d.get("decided_by", ""),
        )

    @staticmethod
    def _joke_to_dict(j: Joke) -> dict:
        return {
            "id": j.id,
            "author": j.author,
            "body": j.body,
            "status": j.status.value,
            "created_at": j.created_at,
            "seq": j.seq,
            "decided_at": j.decided_at,
            "decided_by": j.decided_by,
        }

    def _newest_first(self, records: Iterable[dict]) -> list[Joke]:
        jokes = [self._joke_from_dict(d) for d in records]
        jokes.sort(key=lambda j: j.seq, reverse=True)
        return jokes

    def insert(self, joke: Joke) -> str:
        with self._jokes.transaction() as records:
            if _find(records, "id", joke.id) is not None:
                raise Conflict(f"Joke '{joke.id}' already exists")
            joke.seq = max((d.get("seq", 0) for d in records), default=0) + 1
            records.append(self._joke_to_dict(joke))
        return joke.id

    def find_by_id(self, joke_id: str) -> Optional[Joke]:
        d = _find(self._jokes.snapshot(), "id", joke_id)
        return self._joke_from_dict(d) if d is not None else None

    def find_by_author_and_statuses(
        self, author: str, statuses: Iterable[JokeStatus]
    ) -> list[Joke]:
        wanted = {JokeStatus(s).value for s in statuses}
        return self._newest_first(
            d for d in self._jokes.snapshot()
            if d.get("author") == author and d.get("status") in wanted
        )

    def find_by_status(
        self,
        status: JokeStatus,
        limit: Optional[int] = None,
        order: TrendingPolicy = TrendingPolicy.recent,
        rng: Optional[random.Random] = None,
    ) -> list[Joke]:
        status = JokeStatus(status)
        matches = self._newest_first(
            d for d in self._jokes.snapshot() if d.get("status") == status.value
        )
        if limit is None:
            limit = len(matches)
        if TrendingPolicy(order) is TrendingPolicy.random:
            return (rng or random).sample(matches, min(limit, len(matches)))
        return matches[:limit]

    def update_status(
        self, joke_id: str, status: JokeStatus, decided_by: str = ""
    ) -> Optional[Joke]:
        with self._jokes.transaction() as records:
            d = _find(records, "id", joke_id)
            if d is None:
                return None
            d["status"] = JokeStatus(status).value
            d["decided_at"] = datetime.now(timezone.utc).isoformat()
            d["decided_by"] = decided_by
            return self._joke_from_dict(d)
