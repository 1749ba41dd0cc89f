"""Moderation router -- pending queue, approve/reject and the audit trail.

Every endpoint here requires the ``moderator`` role or higher.
"""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends

from jokedrop.accounts.models import Account, Role
from jokedrop.auth.permissions import require_role
from web.backend.app.middleware.auth import get_current_user, get_services
from web.backend.app.models.api import (
    AuditEntryResponse,
    AuditListResponse,
    JokeListResponse,
    SubmitJokeResponse,
)
from web.backend.app.routers.jokes import joke_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/moderation", tags=["moderation"])


@router.get(
    "/queue",
    response_model=JokeListResponse,
    summary="Pending jokes, oldest first",
)
async def queue(user: Account = Depends(get_current_user)):
    require_role(user, Role.moderator)
    return JokeListResponse(jokes=[joke_response(j) for j in get_services().pipeline.pending_queue()])


@router.post(
    "/{joke_id}/{decision}",
    response_model=SubmitJokeResponse,
    summary="Approve or reject a joke",
)
async def moderate(joke_id: str, decision: str, user: Account = Depends(get_current_user)):
    """Apply ``decision`` (``approve`` or ``reject``) to the joke."""
    require_role(user, Role.moderator)
    services = get_services()
    joke = services.pipeline.moderate(joke_id, decision, moderator=user.email)
    services.audit.log_event(
        actor=user.email,
        action="moderate",
        resource_type="joke",
        resource_id=joke.id,
        details={"decision": decision, "status": joke.status.value, "author": joke.author},
    )
    logger.info("%s set joke %s to %s", user.email, joke.id, joke.status.value)
    return SubmitJokeResponse(joke=joke_response(joke))


@router.get(
    "/audit",
    response_model=AuditListResponse,
    summary="Audit trail, newest first",
)
async def audit(
    actor: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 200,
    user: Account = Depends(get_current_user),
):
    require_role(user, Role.moderator)
    events = get_services().audit.get_events(actor=actor, action=action, limit=limit)
    return AuditListResponse(events=[AuditEntryResponse(**asdict(e)) for e in events])
