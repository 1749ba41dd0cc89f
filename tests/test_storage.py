"""Tests for the JSON-file and in-memory storage backends."""

import json
import tempfile
from pathlib import Path

import pytest

from jokedrop.accounts.models import Account, Privacy, Role
from jokedrop.config import Settings
from jokedrop.content.models import Joke, JokeStatus
from jokedrop.errors import Conflict, InvalidArgument, NotFound
from jokedrop.storage.jsonfile import (
    JsonAccountStore,
    JsonCollection,
    JsonContentStore,
    open_collection,
)


def test_transaction_commits_on_success():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "records.json"
        coll = JsonCollection(path)
        with coll.transaction() as records:
            records.append({"id": "a"})

        assert json.loads(path.read_text()) == [{"id": "a"}]
        assert coll.snapshot() == [{"id": "a"}]


def test_transaction_discards_on_error():
    with tempfile.TemporaryDirectory() as tmpdir:
        for coll in (JsonCollection(Path(tmpdir) / "records.json"), JsonCollection()):
            with coll.transaction() as records:
                records.append({"id": "a"})
            with pytest.raises(RuntimeError):
                with coll.transaction() as records:
                    records.append({"id": "b"})
                    raise RuntimeError("boom")
            assert coll.snapshot() == [{"id": "a"}]


def test_snapshot_is_a_copy():
    coll = JsonCollection()
    with coll.transaction() as records:
        records.append({"id": "a", "tags": []})
    snap = coll.snapshot()
    snap[0]["tags"].append("x")
    assert coll.snapshot() == [{"id": "a", "tags": []}]


def test_open_collection_backends():
    with tempfile.TemporaryDirectory() as tmpdir:
        file_coll = open_collection(Settings(data_dir=Path(tmpdir)), "accounts.json")
        assert file_coll.path == Path(tmpdir) / "accounts.json"
        mem_coll = open_collection(Settings(data_dir=Path(tmpdir), storage="memory"), "accounts.json")
        assert mem_coll.path is None


def test_accounts_persist_across_instances():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "accounts.json"
        store = JsonAccountStore(JsonCollection(path))
        store.create(Account(email="a@x", name="Alice", role=Role.moderator))
        store.create(Account(email="b@x"))
        store.add_follow_edge("a@x", "b@x")

        reopened = JsonAccountStore(JsonCollection(path))
        a = reopened.find_by_identity("a@x")
        assert a.name == "Alice"
        assert a.role == Role.moderator
        assert a.following == ["b@x"]
        assert reopened.find_by_identity("b@x").followers == ["a@x"]
        assert [acc.email for acc in reopened.list_accounts()] == ["a@x", "b@x"]


def test_account_defaults():
    store = JsonAccountStore()
    store.create(Account(email="a@x"))
    a = store.find_by_identity("a@x")
    assert a.privacy == Privacy(name=True, location=True, dob=False)
    assert a.followers == []
    assert a.following == []
    assert a.role == Role.member


def test_identity_is_case_sensitive():
    store = JsonAccountStore()
    store.create(Account(email="a@x"))
    store.create(Account(email="A@x"))
    assert store.find_by_identity("A@x").email == "A@x"
    assert len(store.list_accounts()) == 2


def test_create_duplicate_identity():
    store = JsonAccountStore()
    store.create(Account(email="a@x"))
    with pytest.raises(Conflict):
        store.create(Account(email="a@x"))


def test_update_fields():
    store = JsonAccountStore()
    store.create(Account(email="a@x"))
    updated = store.update("a@x", location="Oslo", privacy=Privacy(dob=True))
    assert updated.location == "Oslo"
    assert updated.privacy.dob is True
    assert store.update("ghost@x", name="x") is None


def test_update_cannot_touch_follow_edges():
    store = JsonAccountStore()
    store.create(Account(email="a@x"))
    with pytest.raises(InvalidArgument):
        store.update("a@x", followers=["b@x"])


def test_edge_with_missing_target_leaves_follower_untouched():
    store = JsonAccountStore()
    store.create(Account(email="a@x"))
    with pytest.raises(NotFound):
        store.add_follow_edge("a@x", "ghost@x")
    assert store.find_by_identity("a@x").following == []


def test_content_seq_and_lookup():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonContentStore(JsonCollection(Path(tmpdir) / "jokes.json"))
        first = Joke(id="j1", author="a@x", body="one")
        second = Joke(id="j2", author="a@x", body="two")
        assert store.insert(first) == "j1"
        store.insert(second)
        assert first.seq == 1
        assert second.seq == 2

        found = store.find_by_id("j2")
        assert found.body == "two"
        assert found.status == JokeStatus.pending
        assert store.find_by_id("nope") is None


def test_content_duplicate_id():
    store = JsonContentStore()
    store.insert(Joke(id="j1", author="a@x", body="one"))
    with pytest.raises(Conflict):
        store.insert(Joke(id="j1", author="a@x", body="again"))


def test_find_by_status_limit_and_order():
    store = JsonContentStore()
    for i in range(4):
        store.insert(Joke(id=f"j{i}", author="a@x", body=str(i)))
    store.update_status("j3", JokeStatus.rejected)

    pending = store.find_by_status(JokeStatus.pending)
    assert [j.id for j in pending] == ["j2", "j1", "j0"]
    assert [j.id for j in store.find_by_status(JokeStatus.pending, limit=1)] == ["j2"]


def test_update_status_missing():
    store = JsonContentStore()
    assert store.update_status("nope", JokeStatus.approved) is None
