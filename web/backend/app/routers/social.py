"""Social router -- follow, unfollow, suggestions and edge listings.

Follow and unfollow are separate idempotent endpoints; a client that wants a
toggle button decides which one to call.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from jokedrop.accounts.models import Account
from web.backend.app.middleware.auth import get_current_user, get_services
from web.backend.app.models.api import (
    EdgeListResponse,
    FollowRequest,
    FollowResponse,
    SuggestionResponse,
    SuggestionsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["social"])


@router.post(
    "/follow",
    response_model=FollowResponse,
    summary="Follow another account",
)
async def follow(body: FollowRequest, user: Account = Depends(get_current_user)):
    """Make the caller follow ``target``. Following twice is not an error."""
    services = get_services()
    services.graph.follow(user.email, body.target)
    services.audit.log_event(
        actor=user.email, action="follow", resource_type="account", resource_id=body.target
    )
    logger.info("%s follows %s", user.email, body.target)
    return FollowResponse(following=services.graph.following(user.email))


@router.post(
    "/unfollow",
    response_model=FollowResponse,
    summary="Stop following an account",
)
async def unfollow(body: FollowRequest, user: Account = Depends(get_current_user)):
    services = get_services()
    services.graph.unfollow(user.email, body.target)
    services.audit.log_event(
        actor=user.email, action="unfollow", resource_type="account", resource_id=body.target
    )
    logger.info("%s unfollows %s", user.email, body.target)
    return FollowResponse(following=services.graph.following(user.email))


@router.get(
    "/users/suggestions",
    response_model=SuggestionsResponse,
    summary="Accounts the caller does not follow yet",
)
async def suggestions(limit: Optional[int] = None, user: Account = Depends(get_current_user)):
    services = get_services()
    if limit is None:
        limit = services.settings.suggestion_limit
    results = services.graph.suggestions(user.email, limit)
    return SuggestionsResponse(
        users=[SuggestionResponse(email=s.email, name=s.name) for s in results]
    )


@router.get(
    "/users/{email}/followers",
    response_model=EdgeListResponse,
    summary="List an account's followers",
)
async def followers(email: str):
    return EdgeListResponse(email=email, users=get_services().graph.followers(email))


@router.get(
    "/users/{email}/following",
    response_model=EdgeListResponse,
    summary="List the accounts an account follows",
)
async def following(email: str):
    return EdgeListResponse(email=email, users=get_services().graph.following(email))
