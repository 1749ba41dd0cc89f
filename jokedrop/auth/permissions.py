"""Moderator gate for the moderation endpoints."""

from __future__ import annotations

from jokedrop.accounts.models import Account, Role
from jokedrop.errors import Forbidden


def has_permission(account: Account, required_role: Role) -> bool:
    return account.role.level >= required_role.level


def require_role(account: Account, role: Role) -> None:
    """Raise ``Forbidden`` unless *account* holds *role* or a higher one."""
    if not has_permission(account, role):
        raise Forbidden(f"{role.value.capitalize()} role required")
