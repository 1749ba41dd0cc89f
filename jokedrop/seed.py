"""Populate a store from a YAML fixture file.

Format::

    accounts:
      - email: alice@example.com
        password: secret
        name: Alice
        privacy: {name: false}
        role: moderator
    follows:
      - [alice@example.com, bob@example.com]
    jokes:
      - author: alice@example.com
        joke: Why did the chicken cross the road?
        status: approved

Accounts that already exist are left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from jokedrop.content.models import Decision, JokeStatus
from jokedrop.errors import Conflict, InvalidArgument
from jokedrop.services import Services


@dataclass
class SeedSummary:
    accounts_created: int = 0
    accounts_skipped: int = 0
    follows: int = 0
    jokes: int = 0


def load_seed(path: str | Path) -> dict:
    """Parse a seed file. Raises ``InvalidArgument`` on malformed YAML."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidArgument(f"Failed to parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise InvalidArgument(f"{path}: top level must be a mapping")
    return data


def apply_seed(services: Services, data: dict) -> SeedSummary:
    # validate every section before writing anything
    accounts = _entries(data, "accounts")
    follows = data.get("follows") or []
    for pair in follows:
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise InvalidArgument(f"Follow entries must be [follower, target] pairs, got {pair!r}")
    jokes = [(entry, _status(entry.get("status", "pending"))) for entry in _entries(data, "jokes")]

    summary = SeedSummary()

    for entry in accounts:
        try:
            services.accounts.register(entry.get("email", ""), entry.get("password", ""))
        except Conflict:
            summary.accounts_skipped += 1
            continue
        summary.accounts_created += 1
        services.accounts.update_profile(
            entry["email"],
            name=entry.get("name"),
            location=entry.get("location"),
            dob=entry.get("dob"),
            profile_picture=entry.get("profile_picture"),
            privacy=entry.get("privacy"),
        )
        if entry.get("role"):
            services.accounts.set_role(entry["email"], entry["role"])

    for pair in follows:
        services.graph.follow(pair[0], pair[1])
        summary.follows += 1

    for entry, status in jokes:
        joke = services.pipeline.submit(entry.get("author", ""), entry.get("joke", ""))
        if status is JokeStatus.approved:
            services.pipeline.moderate(joke.id, Decision.approve, moderator="seed")
        elif status is JokeStatus.rejected:
            services.pipeline.moderate(joke.id, Decision.reject, moderator="seed")
        summary.jokes += 1

    return summary


def _entries(data: dict, section: str) -> list[dict]:
    entries = data.get(section) or []
    if not isinstance(entries, list):
        raise InvalidArgument(f"'{section}' must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise InvalidArgument(f"'{section}' entries must be mappings, got {entry!r}")
    return entries


def _status(raw) -> JokeStatus:
    try:
        return JokeStatus(raw)
    except ValueError:
        raise InvalidArgument(f"Unknown joke status '{raw}'") from None
