"""Tests for joke submission, moderation and trending."""

import random

import pytest

from jokedrop.accounts.models import Account, Privacy
from jokedrop.content.models import Decision, JokeStatus, TrendingPolicy
from jokedrop.content.pipeline import ModerationPipeline
from jokedrop.errors import InvalidArgument, NotFound
from jokedrop.storage.jsonfile import JsonAccountStore, JsonContentStore


def _pipeline(policy=TrendingPolicy.recent, rng=None, max_length=1000):
    accounts = JsonAccountStore()
    accounts.create(Account(email="a@x", name="Alice"))
    pipeline = ModerationPipeline(
        JsonContentStore(), accounts, policy=policy, max_length=max_length, rng=rng
    )
    return accounts, pipeline


def test_submit_creates_pending_joke():
    _, pipeline = _pipeline()
    joke = pipeline.submit("a@x", "why did the chicken...")
    assert joke.status == JokeStatus.pending
    assert joke.author == "a@x"
    assert joke.id
    assert joke.created_at


def test_submit_requires_author_and_body():
    _, pipeline = _pipeline()
    with pytest.raises(InvalidArgument):
        pipeline.submit("", "a joke")
    with pytest.raises(InvalidArgument):
        pipeline.submit("a@x", "")
    with pytest.raises(InvalidArgument):
        pipeline.submit("a@x", "   ")


def test_submit_rejects_overlong_body():
    _, pipeline = _pipeline(max_length=10)
    with pytest.raises(InvalidArgument):
        pipeline.submit("a@x", "x" * 11)


def test_submit_does_not_require_existing_author():
    _, pipeline = _pipeline()
    joke = pipeline.submit("nobody@x", "knock knock")
    assert joke.status == JokeStatus.pending


def test_list_for_author_hides_rejected_and_orders_by_recency():
    _, pipeline = _pipeline()
    first = pipeline.submit("a@x", "first")
    second = pipeline.submit("a@x", "second")
    third = pipeline.submit("a@x", "third")
    pipeline.submit("b@x", "someone else's")

    pipeline.moderate(first.id, "approve")
    pipeline.moderate(second.id, "reject")

    listed = pipeline.list_for_author("a@x")
    assert [j.id for j in listed] == [third.id, first.id]
    assert {j.status for j in listed} == {JokeStatus.pending, JokeStatus.approved}


def test_moderate_approve_and_reject():
    _, pipeline = _pipeline()
    joke = pipeline.submit("a@x", "pun")
    approved = pipeline.moderate(joke.id, Decision.approve, moderator="mod@x")
    assert approved.status == JokeStatus.approved
    assert approved.decided_by == "mod@x"
    assert approved.decided_at

    other = pipeline.submit("a@x", "bad pun")
    assert pipeline.moderate(other.id, "reject").status == JokeStatus.rejected


def test_moderate_overwrites_previous_decision():
    _, pipeline = _pipeline()
    joke = pipeline.submit("a@x", "pun")
    pipeline.moderate(joke.id, "approve")
    assert pipeline.moderate(joke.id, "approve").status == JokeStatus.approved
    assert pipeline.moderate(joke.id, "reject").status == JokeStatus.rejected


def test_moderate_unknown_joke():
    _, pipeline = _pipeline()
    with pytest.raises(NotFound):
        pipeline.moderate("missing", "approve")


def test_moderate_unknown_decision():
    _, pipeline = _pipeline()
    joke = pipeline.submit("a@x", "pun")
    for decision in ("pending", "delete", ""):
        with pytest.raises(InvalidArgument):
            pipeline.moderate(joke.id, decision)
    assert pipeline.list_for_author("a@x")[0].status == JokeStatus.pending


def test_pending_queue_oldest_first():
    _, pipeline = _pipeline()
    first = pipeline.submit("a@x", "one")
    second = pipeline.submit("a@x", "two")
    third = pipeline.submit("a@x", "three")
    pipeline.moderate(second.id, "approve")

    assert [j.id for j in pipeline.pending_queue()] == [first.id, third.id]


def test_trending_only_returns_approved():
    _, pipeline = _pipeline()
    approved = pipeline.submit("a@x", "approved one")
    pipeline.submit("a@x", "still pending")
    rejected = pipeline.submit("a@x", "rejected one")
    pipeline.moderate(approved.id, "approve")
    pipeline.moderate(rejected.id, "reject")

    results = pipeline.trending(5)
    assert [t.id for t in results] == [approved.id]


def test_trending_most_recent_first():
    _, pipeline = _pipeline()
    ids = []
    for i in range(4):
        joke = pipeline.submit("a@x", f"joke {i}")
        pipeline.moderate(joke.id, "approve")
        ids.append(joke.id)

    assert [t.id for t in pipeline.trending(2)] == [ids[3], ids[2]]
    assert pipeline.trending(0) == []


def test_trending_random_sample():
    _, pipeline = _pipeline(policy=TrendingPolicy.random, rng=random.Random(7))
    ids = set()
    for i in range(6):
        joke = pipeline.submit("a@x", f"joke {i}")
        pipeline.moderate(joke.id, "approve")
        ids.add(joke.id)
    pipeline.submit("a@x", "pending one")

    sample = pipeline.trending(3)
    assert len(sample) == 3
    assert len({t.id for t in sample}) == 3
    assert {t.id for t in sample} <= ids

    assert {t.id for t in pipeline.trending(10)} == ids


def test_trending_names_respect_privacy():
    accounts, pipeline = _pipeline()
    accounts.create(Account(email="b@x", name="Bob", privacy=Privacy(name=False)))
    accounts.create(Account(email="c@x"))

    for author in ("a@x", "b@x", "c@x", "ghost@x"):
        joke = pipeline.submit(author, f"by {author}")
        pipeline.moderate(joke.id, "approve")

    names = {t.author: t.name for t in pipeline.trending(10)}
    assert names == {
        "a@x": "Alice",
        "b@x": "b@x",  # name hidden
        "c@x": "c@x",  # no name set
        "ghost@x": "ghost@x",  # no account
    }


def test_trending_negative_size():
    _, pipeline = _pipeline()
    with pytest.raises(InvalidArgument):
        pipeline.trending(-1)


def test_submit_list_moderate_trending_scenario():
    _, pipeline = _pipeline()
    joke = pipeline.submit("a@x", "why did the chicken...")
    assert joke.status == JokeStatus.pending
    assert joke.id in [j.id for j in pipeline.list_for_author("a@x")]

    assert pipeline.moderate(joke.id, "approve").status == JokeStatus.approved

    trending = pipeline.trending(5)
    assert [(t.id, t.name) for t in trending] == [(joke.id, "Alice")]
