"""Wiring of stores and services for one process."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from jokedrop.accounts.service import AccountService
from jokedrop.auth.sessions import SessionStore
from jokedrop.config import Settings
from jokedrop.content.pipeline import ModerationPipeline
from jokedrop.graph.manager import SocialGraph
from jokedrop.security.audit_log import AuditLogger
from jokedrop.storage.base import AccountStore, ContentStore
from jokedrop.storage.jsonfile import JsonAccountStore, JsonContentStore, open_collection


@dataclass
class Services:
    """Everything a dispatch layer (HTTP or CLI) binds to."""

    settings: Settings
    account_store: AccountStore
    content_store: ContentStore
    accounts: AccountService
    graph: SocialGraph
    pipeline: ModerationPipeline
    audit: AuditLogger


def build_services(settings: Optional[Settings] = None, rng: Optional[random.Random] = None) -> Services:
    """Build the configured backends and the services on top of them."""
    settings = settings or Settings.from_env()
    account_store = JsonAccountStore(open_collection(settings, "accounts.json"))
    content_store = JsonContentStore(open_collection(settings, "jokes.json"))
    sessions = SessionStore(open_collection(settings, "sessions.json"), settings.session_hours)
    audit_dir = settings.data_dir / "audit_logs" if settings.storage == "json" else None
    return Services(
        settings=settings,
        account_store=account_store,
        content_store=content_store,
        accounts=AccountService(account_store, sessions, settings),
        graph=SocialGraph(account_store),
        pipeline=ModerationPipeline(
            content_store,
            account_store,
            policy=settings.trending_policy,
            max_length=settings.max_joke_length,
            rng=rng,
        ),
        audit=AuditLogger(audit_dir),
    )
