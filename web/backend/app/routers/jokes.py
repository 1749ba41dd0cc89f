"""Jokes router -- submission, per-author listing and trending."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from jokedrop.accounts.models import Account
from jokedrop.content.models import Joke
from web.backend.app.middleware.auth import get_current_user, get_services
from web.backend.app.models.api import (
    JokeListResponse,
    JokeResponse,
    SubmitJokeRequest,
    SubmitJokeResponse,
    TrendingJokeResponse,
    TrendingResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["jokes"])


def joke_response(j: Joke) -> JokeResponse:
    """Convert a domain Joke to a Pydantic JokeResponse."""
    return JokeResponse(
        id=j.id,
        author=j.author,
        joke=j.body,
        status=j.status.value,
        created_at=j.created_at,
        decided_at=j.decided_at,
        decided_by=j.decided_by,
    )


@router.post(
    "/jokes",
    response_model=SubmitJokeResponse,
    summary="Submit a joke for moderation",
    status_code=status.HTTP_201_CREATED,
)
async def submit_joke(body: SubmitJokeRequest, user: Account = Depends(get_current_user)):
    """Store the joke as ``pending`` under the caller's identity."""
    joke = get_services().pipeline.submit(user.email, body.joke)
    logger.info("Joke %s submitted by %s", joke.id, user.email)
    return SubmitJokeResponse(joke=joke_response(joke))


@router.get(
    "/jokes",
    response_model=JokeListResponse,
    summary="List an author's pending and approved jokes",
)
async def list_jokes(email: str = ""):
    """Return the author's jokes, most recent first. Rejected jokes are never listed."""
    jokes = get_services().pipeline.list_for_author(email)
    return JokeListResponse(jokes=[joke_response(j) for j in jokes])


@router.get(
    "/trending",
    response_model=TrendingResponse,
    summary="Sample of approved jokes",
)
async def trending(size: Optional[int] = None):
    services = get_services()
    if size is None:
        size = services.settings.trending_size
    results = services.pipeline.trending(size)
    return TrendingResponse(
        policy=services.pipeline.policy.value,
        jokes=[
            TrendingJokeResponse(id=t.id, joke=t.body, author=t.author, name=t.name)
            for t in results
        ],
    )
