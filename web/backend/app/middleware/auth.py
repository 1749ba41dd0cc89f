"""Auth middleware -- FastAPI dependencies for the services and the current user.

Clients authenticate with ``Authorization: Bearer <session_token>`` using the
token returned by ``POST /api/login``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Header

from jokedrop.accounts.models import Account
from jokedrop.errors import Unauthorized
from jokedrop.services import Services, build_services

# Shared services instance
_services: Optional[Services] = None


def get_services() -> Services:
    """Return the singleton Services instance, building it from the environment."""
    global _services
    if _services is None:
        _services = build_services()
    return _services


def set_services(services: Optional[Services]) -> None:
    """Replace the singleton (tests bind in-memory services here)."""
    global _services
    _services = services


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization:
        return ""
    scheme, _, token = authorization.partition(" ")
    return token.strip() if scheme.lower() == "bearer" else ""


async def get_current_user(authorization: Optional[str] = Header(None)) -> Account:
    """FastAPI dependency that resolves the bearer token to an account.

    Raises ``Unauthorized`` (rendered as 401) if the token is missing,
    unknown or expired.
    """
    token = _bearer_token(authorization)
    if not token:
        raise Unauthorized("Not authenticated")
    return get_services().accounts.authenticate(token)


async def get_optional_user(authorization: Optional[str] = Header(None)) -> Optional[Account]:
    """Same as ``get_current_user`` but returns ``None`` instead of raising.

    Use this for endpoints that work for both anonymous and authenticated users.
    """
    try:
        return await get_current_user(authorization=authorization)
    except Unauthorized:
        return None


async def get_token(authorization: Optional[str] = Header(None)) -> str:
    return _bearer_token(authorization)
