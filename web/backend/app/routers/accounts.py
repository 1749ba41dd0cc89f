"""Accounts router -- registration, login, profile and password endpoints."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from jokedrop.accounts.models import Account
from web.backend.app.middleware.auth import (
    get_current_user,
    get_optional_user,
    get_services,
    get_token,
)
from web.backend.app.models.api import (
    ChangePasswordRequest,
    CredentialsRequest,
    LoginResponse,
    OkResponse,
    ProfileResponse,
    ProfileUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["accounts"])


@router.post(
    "/register",
    response_model=OkResponse,
    summary="Register a new account",
    status_code=status.HTTP_201_CREATED,
)
async def register(body: CredentialsRequest):
    """Create an account with default privacy and no follow edges."""
    services = get_services()
    account = services.accounts.register(body.email, body.password)
    services.audit.log_event(
        actor=account.email,
        action="register",
        resource_type="account",
        resource_id=account.email,
        details={"role": account.role.value},
    )
    logger.info("Registered %s (role=%s)", account.email, account.role.value)
    return OkResponse()


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Exchange credentials for a session token",
)
async def login(body: CredentialsRequest):
    services = get_services()
    session = services.accounts.login(body.email, body.password)
    account = services.account_store.find_by_identity(session.email)
    logger.info("Login %s", session.email)
    return LoginResponse(
        token=session.token,
        email=session.email,
        role=account.role.value if account is not None else "member",
        expires_at=session.expires_at,
    )


@router.post(
    "/logout",
    response_model=OkResponse,
    summary="Revoke the current session token",
)
async def logout(token: str = Depends(get_token), user: Account = Depends(get_current_user)):
    get_services().accounts.logout(token)
    return OkResponse()


@router.get(
    "/profile",
    response_model=ProfileResponse,
    summary="Get a profile",
)
async def get_profile(email: str = "", viewer: Optional[Account] = Depends(get_optional_user)):
    """Return the profile of ``email``.

    Name, location and date of birth are withheld from other callers when the
    owner's privacy flags say so.
    """
    profile = get_services().accounts.get_profile(
        email, viewer=viewer.email if viewer is not None else None
    )
    return ProfileResponse(**profile)


@router.post(
    "/profile",
    response_model=ProfileResponse,
    summary="Update the caller's profile",
)
async def update_profile(body: ProfileUpdateRequest, user: Account = Depends(get_current_user)):
    """Replace the caller's profile fields; omitted fields reset to defaults."""
    updated = get_services().accounts.update_profile(
        user.email,
        name=body.name,
        location=body.location,
        dob=body.dob,
        profile_picture=body.profile_picture,
        privacy=body.privacy.model_dump() if body.privacy is not None else None,
    )
    return ProfileResponse(**updated.public_view(user.email))


@router.post(
    "/change-password",
    response_model=OkResponse,
    summary="Change the caller's password",
)
async def change_password(body: ChangePasswordRequest, user: Account = Depends(get_current_user)):
    get_services().accounts.change_password(user.email, body.current_password, body.new_password)
    logger.info("Password changed for %s", user.email)
    return OkResponse()
