"""Tests for registration, login, profiles, passwords and role checks."""

import pytest

from jokedrop.accounts.models import Account, Role
from jokedrop.accounts.passwords import hash_password, verify_password
from jokedrop.auth.permissions import has_permission, require_role
from jokedrop.auth.sessions import SessionStore
from jokedrop.config import Settings
from jokedrop.errors import Conflict, Forbidden, InvalidArgument, NotFound, Unauthorized
from jokedrop.services import build_services
from jokedrop.storage.jsonfile import JsonCollection


def _services(**overrides):
    settings = Settings(storage="memory", password_rounds=4, **overrides)
    return build_services(settings)


def test_password_hash_roundtrip():
    stored = hash_password("hunter2", rounds=4)
    assert stored.startswith("$2b$04$")
    assert "hunter2" not in stored
    assert verify_password("hunter2", stored)
    assert not verify_password("hunter3", stored)


def test_password_hashes_are_salted():
    assert hash_password("same", rounds=4) != hash_password("same", rounds=4)


def test_password_length_limit():
    with pytest.raises(InvalidArgument):
        hash_password("x" * 73, rounds=4)
    assert not verify_password("x" * 73, hash_password("x" * 72, rounds=4))


def test_verify_password_rejects_garbage():
    assert not verify_password("x", "")
    assert not verify_password("x", "plaintext")
    assert not verify_password("x", "md5$1$00$00")


def test_register_defaults():
    services = _services()
    account = services.accounts.register("a@x", "secret")
    assert account.role == Role.member
    assert account.password_hash != "secret"

    profile = services.accounts.get_profile("a@x", viewer="a@x")
    assert profile["name"] == ""
    assert profile["privacy"] == {"name": True, "location": True, "dob": False}
    assert profile["followers"] == []
    assert profile["following"] == []


def test_register_moderator_from_settings():
    services = _services(moderators=frozenset({"mod@x"}))
    assert services.accounts.register("mod@x", "secret").role == Role.moderator


def test_register_duplicate_and_missing_fields():
    services = _services()
    services.accounts.register("a@x", "secret")
    with pytest.raises(Conflict):
        services.accounts.register("a@x", "other")
    with pytest.raises(InvalidArgument):
        services.accounts.register("", "secret")
    with pytest.raises(InvalidArgument):
        services.accounts.register("b@x", "")


def test_login_and_authenticate():
    services = _services()
    services.accounts.register("a@x", "secret")
    session = services.accounts.login("a@x", "secret")
    assert session.token
    assert services.accounts.authenticate(session.token).email == "a@x"

    services.accounts.logout(session.token)
    with pytest.raises(Unauthorized):
        services.accounts.authenticate(session.token)


def test_login_wrong_credentials():
    services = _services()
    services.accounts.register("a@x", "secret")
    with pytest.raises(Unauthorized):
        services.accounts.login("a@x", "wrong")
    with pytest.raises(Unauthorized):
        services.accounts.login("ghost@x", "secret")


def test_login_unknown_identity_still_checks_a_hash(monkeypatch):
    services = _services()
    checked = []

    def recording_verify(raw, stored):
        checked.append(stored)
        return False

    monkeypatch.setattr("jokedrop.accounts.service.verify_password", recording_verify)
    with pytest.raises(Unauthorized):
        services.accounts.login("ghost@x", "secret")
    assert len(checked) == 1
    assert checked[0].startswith("$2b$04$")


def test_expired_session_is_rejected():
    store = SessionStore(expires_in_hours=-1)
    session = store.create_session("a@x")
    assert store.validate_session(session.token) is None
    assert store.delete_session(session.token) is False


def test_create_session_purges_expired_records():
    collection = JsonCollection()
    with collection.transaction() as records:
        records.append({"id": "old", "email": "a@x", "token": "stale", "expires_at": "2000-01-01T00:00:00+00:00"})
    store = SessionStore(collection)
    session = store.create_session("b@x")

    assert [d["token"] for d in collection.snapshot()] == [session.token]
    assert store.validate_session(session.token) == "b@x"


def test_profile_privacy_for_third_parties():
    services = _services()
    services.accounts.register("a@x", "secret")
    services.accounts.update_profile(
        "a@x",
        name="Alice",
        location="Oslo",
        dob="1990-01-01",
        profile_picture="https://img/a.png",
        privacy={"name": False, "location": True, "dob": False},
    )

    public = services.accounts.get_profile("a@x", viewer="b@x")
    assert public["name"] == ""
    assert public["location"] == "Oslo"
    assert public["dob"] == ""
    assert public["profile_picture"] == "https://img/a.png"

    own = services.accounts.get_profile("a@x", viewer="a@x")
    assert own["name"] == "Alice"
    assert own["dob"] == "1990-01-01"


def test_update_profile_resets_omitted_fields():
    services = _services()
    services.accounts.register("a@x", "secret")
    services.accounts.update_profile("a@x", name="Alice", location="Oslo")
    updated = services.accounts.update_profile("a@x", name="Alice")
    assert updated.location == ""
    assert updated.privacy.name is True
    assert updated.privacy.dob is False


def test_update_profile_keeps_follow_edges():
    services = _services()
    services.accounts.register("a@x", "secret")
    services.accounts.register("b@x", "secret")
    services.graph.follow("a@x", "b@x")
    services.accounts.update_profile("a@x", name="Alice")
    assert services.graph.following("a@x") == ["b@x"]


def test_profile_unknown_account():
    services = _services()
    with pytest.raises(NotFound):
        services.accounts.get_profile("ghost@x")
    with pytest.raises(NotFound):
        services.accounts.update_profile("ghost@x", name="x")


def test_change_password():
    services = _services()
    services.accounts.register("a@x", "old")
    with pytest.raises(Unauthorized):
        services.accounts.change_password("a@x", "wrong", "new")
    with pytest.raises(InvalidArgument):
        services.accounts.change_password("a@x", "old", "")

    services.accounts.change_password("a@x", "old", "new")
    services.accounts.login("a@x", "new")
    with pytest.raises(Unauthorized):
        services.accounts.login("a@x", "old")


def test_set_role():
    services = _services()
    services.accounts.register("a@x", "secret")
    assert services.accounts.set_role("a@x", "admin").role == Role.admin
    with pytest.raises(InvalidArgument):
        services.accounts.set_role("a@x", "overlord")
    with pytest.raises(NotFound):
        services.accounts.set_role("ghost@x", "admin")


def test_role_hierarchy():
    member = Account(email="m@x")
    moderator = Account(email="mod@x", role=Role.moderator)
    admin = Account(email="adm@x", role=Role.admin)

    assert not has_permission(member, Role.moderator)
    assert has_permission(moderator, Role.moderator)
    assert has_permission(admin, Role.moderator)
    assert not has_permission(moderator, Role.admin)

    require_role(moderator, Role.moderator)
    with pytest.raises(Forbidden):
        require_role(member, Role.moderator)
