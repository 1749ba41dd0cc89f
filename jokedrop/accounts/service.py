"""Registration, login and profile management."""

from __future__ import annotations

import secrets
from typing import Any, Mapping, Optional

from jokedrop.accounts.models import Account, Privacy, Role
from jokedrop.accounts.passwords import hash_password, verify_password
from jokedrop.auth.sessions import Session, SessionStore
from jokedrop.config import Settings
from jokedrop.errors import InvalidArgument, NotFound, Unauthorized
from jokedrop.storage.base import AccountStore


class AccountService:
    """Account lifecycle operations over an :class:`AccountStore`."""

    def __init__(
        self,
        accounts: AccountStore,
        sessions: SessionStore,
        settings: Optional[Settings] = None,
    ) -> None:
        self._accounts = accounts
        self._sessions = sessions
        self._settings = settings or Settings(storage="memory")
        # compared against when the identity is unknown so login time does not leak it
        self._dummy_hash = hash_password(secrets.token_urlsafe(16), self._settings.password_rounds)

    def _get(self, email: str) -> Account:
        account = self._accounts.find_by_identity(email)
        if account is None:
            raise NotFound("User not found")
        return account

    # ------------------------------------------------------------------
    # Registration & login
    # ------------------------------------------------------------------

    def register(self, email: str, password: str) -> Account:
        """Create an account with empty follow edges and default privacy.

        Identities listed in ``settings.moderators`` start out as moderators.
        """
        if not email or not password:
            raise InvalidArgument("Email and password required")
        role = Role.moderator if email in self._settings.moderators else Role.member
        account = Account(
            email=email,
            password_hash=hash_password(password, self._settings.password_rounds),
            role=role,
        )
        return self._accounts.create(account)

    def login(self, email: str, password: str) -> Session:
        account = self._accounts.find_by_identity(email) if email else None
        stored = account.password_hash if account is not None else self._dummy_hash
        if not verify_password(password or "", stored) or account is None:
            raise Unauthorized("Invalid credentials")
        return self._sessions.create_session(account.email)

    def logout(self, token: str) -> bool:
        return self._sessions.delete_session(token)

    def authenticate(self, token: str) -> Account:
        """Resolve a session token to its account. Raises ``Unauthorized``."""
        email = self._sessions.validate_session(token) if token else None
        account = self._accounts.find_by_identity(email) if email else None
        if account is None:
            raise Unauthorized("Not authenticated")
        return account

    def change_password(self, email: str, current_password: str, new_password: str) -> None:
        account = self._get(email)
        if not verify_password(current_password or "", account.password_hash):
            raise Unauthorized("Incorrect current password")
        if not new_password:
            raise InvalidArgument("New password required")
        self._accounts.update(
            email,
            password_hash=hash_password(new_password, self._settings.password_rounds),
        )

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def get_profile(self, email: str, viewer: Optional[str] = None) -> dict[str, Any]:
        """Return the profile of *email* as *viewer* may see it."""
        if not email:
            raise InvalidArgument("Email required")
        return self._get(email).public_view(viewer)

    def update_profile(
        self,
        email: str,
        name: Optional[str] = None,
        location: Optional[str] = None,
        dob: Optional[str] = None,
        profile_picture: Optional[str] = None,
        privacy: Optional[Mapping[str, bool]] = None,
    ) -> Account:
        """Replace the profile fields; anything omitted resets to its default."""
        privacy = privacy or {}
        updated = self._accounts.update(
            email,
            name=name or "",
            location=location or "",
            dob=dob or "",
            profile_picture=profile_picture or "",
            privacy=Privacy(
                name=bool(privacy.get("name", True)),
                location=bool(privacy.get("location", True)),
                dob=bool(privacy.get("dob", False)),
            ),
        )
        if updated is None:
            raise NotFound("User not found")
        return updated

    def set_role(self, email: str, role: Role | str) -> Account:
        try:
            role = Role(role)
        except ValueError:
            raise InvalidArgument(f"Unknown role '{role}'") from None
        updated = self._accounts.update(email, role=role)
        if updated is None:
            raise NotFound("User not found")
        return updated
