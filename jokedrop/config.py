"""Environment-driven settings for the Joke Drop service.

All settings come from ``JOKEDROP_*`` environment variables; anything unset
falls back to the defaults below.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

from jokedrop.accounts.passwords import DEFAULT_ROUNDS
from jokedrop.content.models import TrendingPolicy
from jokedrop.errors import InvalidArgument

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_MODERATOR = "admin@joke-drop.com"
DEFAULT_DATA_DIR = Path.home() / ".jokedrop"
STORAGE_BACKENDS = ("json", "memory")


@dataclass
class Settings:
    """Runtime configuration shared by the services, web app and CLI."""

    data_dir: Path = DEFAULT_DATA_DIR
    storage: str = "json"  # json | memory
    moderators: frozenset[str] = field(default_factory=lambda: frozenset({DEFAULT_MODERATOR}))
    trending_policy: TrendingPolicy = TrendingPolicy.recent
    trending_size: int = 5
    suggestion_limit: int = 5
    session_hours: int = 24
    max_joke_length: int = 1000
    password_rounds: int = DEFAULT_ROUNDS
    debug: bool = False

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)
        if isinstance(self.trending_policy, str):
            self.trending_policy = TrendingPolicy(self.trending_policy)
        if self.storage not in STORAGE_BACKENDS:
            raise InvalidArgument(
                f"Unknown storage backend '{self.storage}' (expected one of {', '.join(STORAGE_BACKENDS)})"
            )
        for name in ("trending_size", "suggestion_limit", "session_hours", "max_joke_length"):
            if getattr(self, name) < 1:
                raise InvalidArgument(f"{name} must be a positive integer")
        if not 4 <= self.password_rounds <= 31:
            raise InvalidArgument("password_rounds must be between 4 and 31")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ

        moderators_raw = env.get("JOKEDROP_MODERATORS", DEFAULT_MODERATOR)
        moderators = frozenset(m.strip() for m in moderators_raw.split(",") if m.strip())

        policy_raw = env.get("JOKEDROP_TRENDING_POLICY", TrendingPolicy.recent.value)
        try:
            policy = TrendingPolicy(policy_raw.strip().lower())
        except ValueError:
            raise InvalidArgument(f"Unknown trending policy '{policy_raw}'") from None

        return cls(
            data_dir=Path(env.get("JOKEDROP_DATA_DIR", str(DEFAULT_DATA_DIR))).expanduser(),
            storage=env.get("JOKEDROP_STORAGE", "json").strip().lower(),
            moderators=moderators,
            trending_policy=policy,
            trending_size=_int(env, "JOKEDROP_TRENDING_SIZE", 5),
            suggestion_limit=_int(env, "JOKEDROP_SUGGESTION_LIMIT", 5),
            session_hours=_int(env, "JOKEDROP_SESSION_HOURS", 24),
            max_joke_length=_int(env, "JOKEDROP_MAX_JOKE_LENGTH", 1000),
            password_rounds=_int(env, "JOKEDROP_PASSWORD_ROUNDS", DEFAULT_ROUNDS),
            debug=env.get("JOKEDROP_DEBUG", "").strip().lower() in ("1", "true", "yes", "on"),
        )


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidArgument(f"{key} must be an integer, got '{raw}'") from None
