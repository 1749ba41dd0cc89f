"""Account domain models: profile, privacy flags, role and follow edges."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional


class Role(str, Enum):
    """Role hierarchy: admin > moderator > member."""

    admin = "admin"
    moderator = "moderator"
    member = "member"

    @property
    def level(self) -> int:
        """Return numeric level for comparison (higher = more privileges)."""
        return {
            Role.admin: 30,
            Role.moderator: 20,
            Role.member: 10,
        }[self]


@dataclass
class Privacy:
    """Per-field visibility toward other accounts. The picture is always visible."""

    name: bool = True
    location: bool = True
    dob: bool = False


@dataclass
class Account:
    """A registered account.

    ``followers`` and ``following`` are kept as ordered lists with set
    semantics; the stores are responsible for keeping the two sides of every
    edge in sync.
    """

    email: str
    password_hash: str = ""
    name: str = ""
    location: str = ""
    dob: str = ""
    profile_picture: str = ""
    privacy: Privacy = field(default_factory=Privacy)
    followers: list[str] = field(default_factory=list)
    following: list[str] = field(default_factory=list)
    role: Role = Role.member
    created_at: str = ""

    def __post_init__(self) -> None:
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()
        if isinstance(self.role, str):
            self.role = Role(self.role)
        if isinstance(self.privacy, dict):
            self.privacy = Privacy(**self.privacy)

    def visible_name(self) -> str:
        """Return the display name as third parties see it ("" when hidden)."""
        return self.name if self.privacy.name else ""

    def label(self) -> str:
        """Return the visible name, or the identity when the name is hidden or empty."""
        return self.visible_name() or self.email

    def public_view(self, viewer: Optional[str] = None) -> dict[str, Any]:
        """Return the profile as *viewer* is allowed to see it.

        The owner sees every field; anyone else gets name, location and dob
        blanked out when the matching privacy flag is off.
        """
        own = viewer == self.email
        return {
            "email": self.email,
            "name": self.name if own or self.privacy.name else "",
            "location": self.location if own or self.privacy.location else "",
            "dob": self.dob if own or self.privacy.dob else "",
            "profile_picture": self.profile_picture,
            "privacy": {
                "name": self.privacy.name,
                "location": self.privacy.location,
                "dob": self.privacy.dob,
            },
            "followers": list(self.followers),
            "following": list(self.following),
        }


@dataclass
class Suggestion:
    """An account suggested for following."""

    email: str
    name: str
