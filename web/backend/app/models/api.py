"""Pydantic models for API request/response serialization.

These models mirror the jokedrop dataclasses. Every response carries a
``success`` flag; failures are rendered as ``{"success": false, "error": ...}``
by the exception handlers in ``main.py``.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class OkResponse(BaseModel):
    success: bool = True


# ---------------------------------------------------------------------------
# Account models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Body of ``/register`` and ``/login``."""

    email: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    email: str
    role: str
    expires_at: str = ""


class PrivacyModel(BaseModel):
    """Mirrors jokedrop.accounts.models.Privacy."""

    name: bool = True
    location: bool = True
    dob: bool = False


class ProfileUpdateRequest(BaseModel):
    """Replaces the caller's profile; omitted fields reset to their defaults."""

    name: Optional[str] = None
    location: Optional[str] = None
    dob: Optional[str] = None
    profile_picture: Optional[str] = Field(default=None, alias="profilePicture")
    privacy: Optional[PrivacyModel] = None

    model_config = {"populate_by_name": True}


class ProfileResponse(BaseModel):
    """Profile as seen by the caller (privacy-filtered for third parties)."""

    success: bool = True
    email: str
    name: str = ""
    location: str = ""
    dob: str = ""
    profile_picture: str = ""
    privacy: PrivacyModel = Field(default_factory=PrivacyModel)
    followers: list[str] = Field(default_factory=list)
    following: list[str] = Field(default_factory=list)


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(default="", alias="currentPassword")
    new_password: str = Field(default="", alias="newPassword")

    model_config = {"populate_by_name": True}


# ---------------------------------------------------------------------------
# Social graph models
# ---------------------------------------------------------------------------


class FollowRequest(BaseModel):
    target: str = ""


class FollowResponse(BaseModel):
    success: bool = True
    following: list[str] = Field(default_factory=list)


class SuggestionResponse(BaseModel):
    """Mirrors jokedrop.accounts.models.Suggestion."""

    email: str
    name: str = ""


class SuggestionsResponse(BaseModel):
    success: bool = True
    users: list[SuggestionResponse] = Field(default_factory=list)


class EdgeListResponse(BaseModel):
    success: bool = True
    email: str
    users: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Joke models
# ---------------------------------------------------------------------------


class SubmitJokeRequest(BaseModel):
    joke: str = ""


class JokeResponse(BaseModel):
    """Mirrors jokedrop.content.models.Joke."""

    id: str
    author: str
    joke: str
    status: str
    created_at: str = ""
    decided_at: str = ""
    decided_by: str = ""


class SubmitJokeResponse(BaseModel):
    success: bool = True
    joke: JokeResponse


class JokeListResponse(BaseModel):
    success: bool = True
    jokes: list[JokeResponse] = Field(default_factory=list)


class TrendingJokeResponse(BaseModel):
    """Mirrors jokedrop.content.models.TrendingJoke."""

    id: str
    joke: str
    author: str
    name: str


class TrendingResponse(BaseModel):
    success: bool = True
    policy: str = "recent"
    jokes: list[TrendingJokeResponse] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Moderation models
# ---------------------------------------------------------------------------


class AuditEntryResponse(BaseModel):
    """Mirrors jokedrop.security.audit_log.AuditEntry."""

    id: str
    timestamp: str
    actor: str
    action: str
    resource_type: str
    resource_id: str
    details: dict[str, Any] = Field(default_factory=dict)


class AuditListResponse(BaseModel):
    success: bool = True
    events: list[AuditEntryResponse] = Field(default_factory=list)
