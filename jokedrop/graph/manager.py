"""Social graph: symmetric follow edges and follow suggestions.

Every edge is held twice, once in ``follower.following`` and once in
``target.followers``. Both sides change in the same store call, so no reader
sees one without the other.
"""

from __future__ import annotations

from jokedrop.accounts.models import Account, Suggestion
from jokedrop.errors import InvalidArgument, InvalidOperation, NotFound
from jokedrop.storage.base import AccountStore


class SocialGraph:
    """Follow / unfollow and suggestion queries over an :class:`AccountStore`."""

    def __init__(self, accounts: AccountStore) -> None:
        self._accounts = accounts

    def _get(self, email: str) -> Account:
        account = self._accounts.find_by_identity(email)
        if account is None:
            raise NotFound(f"User '{email}' not found")
        return account

    def _check_pair(self, follower: str, target: str) -> None:
        if not follower or not target:
            raise InvalidArgument("Follower and target required")
        if follower == target:
            raise InvalidOperation("Cannot follow yourself")

    def follow(self, follower: str, target: str) -> None:
        """Make *follower* follow *target*. Repeating the call is a no-op."""
        self._check_pair(follower, target)
        self._accounts.add_follow_edge(follower, target)

    def unfollow(self, follower: str, target: str) -> None:
        """Remove the follower -> target edge if present."""
        self._check_pair(follower, target)
        self._accounts.remove_follow_edge(follower, target)

    def followers(self, email: str) -> list[str]:
        return sorted(self._get(email).followers)

    def following(self, email: str) -> list[str]:
        return sorted(self._get(email).following)

    def suggestions(self, for_id: str, limit: int = 5) -> list[Suggestion]:
        """Return up to *limit* accounts *for_id* does not follow yet.

        Results are in registration order and never include *for_id* itself.
        Names go through each account's own privacy flag.
        """
        if limit < 0:
            raise InvalidArgument("limit must not be negative")
        me = self._get(for_id)
        excluded = set(me.following) | {me.email}
        results: list[Suggestion] = []
        for account in self._accounts.list_accounts():
            if len(results) >= limit:
                break
            if account.email in excluded:
                continue
            results.append(Suggestion(email=account.email, name=account.visible_name()))
        return results
