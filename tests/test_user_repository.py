"""
UserRepository against a temporary SQLite database.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from trailsocial.core.config import DEFAULT_AVATAR_URL
from trailsocial.core.errors import (
    ConstraintViolation,
    InvalidField,
    MissingField,
    NotFound,
    UsernameConstraintViolation,
    UsernameTaken,
)
from trailsocial.core.security import valid_password
from trailsocial.domain.pagination import PageQuery
from trailsocial.domain.users import NewUser, ProfileUpdate
from trailsocial.repositories import user_repository
from trailsocial.repositories.user_repository import UserRepository


class _FrozenClock:
    @staticmethod
    def now(tz=None):
        return datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture()
def repo(store):
    return UserRepository(store)


def _create(repo, username, password="secret1", **extra):
    return repo.create(NewUser(username=username, password=password, **extra))


def test_create_returns_public_projection(repo):
    user = _create(repo, "alice", name="Alice", bio="Trail runner")

    assert user.username == "alice"
    assert user.name == "Alice"
    assert user.avatar_url == DEFAULT_AVATAR_URL
    assert not hasattr(user, "hash")
    assert not hasattr(user, "salt")
    assert repo.find_by_id(user.id) == user
    assert repo.find_by_username("alice") == user


def test_create_stores_salted_hash(repo):
    _create(repo, "alice")
    _create(repo, "bob")

    alice = repo.get_credentials("alice")
    bob = repo.get_credentials("bob")
    assert alice.hash != "secret1"
    assert alice.salt != bob.salt
    assert alice.hash != bob.hash
    assert valid_password("secret1", alice.hash, alice.salt)


def test_create_requires_username_and_password(repo):
    with pytest.raises(MissingField):
        repo.create(NewUser(username="alice"))
    with pytest.raises(MissingField):
        repo.create(NewUser(username="   ", password="secret1"))
    assert repo.count() == 0


def test_create_rejects_overlong_fields(repo):
    with pytest.raises(InvalidField):
        _create(repo, "x" * 16)
    with pytest.raises(InvalidField):
        _create(repo, "alice", name="n" * 51)


def test_duplicate_username_is_taken(repo):
    _create(repo, "alice")
    with pytest.raises(UsernameTaken) as excinfo:
        _create(repo, "alice", password="other")
    assert not isinstance(excinfo.value, ConstraintViolation)
    assert repo.count() == 1


def test_unique_index_catches_race(repo, monkeypatch):
    # Skip the pre-check so the second insert reaches the unique index.
    monkeypatch.setattr(UserRepository, "_get_by_username", lambda self, session, username: None)
    _create(repo, "alice")

    with pytest.raises(UsernameConstraintViolation) as excinfo:
        _create(repo, "alice")
    assert isinstance(excinfo.value, UsernameTaken)
    assert excinfo.value.code == "username_taken"
    assert repo.count() == 1


def test_list_is_newest_first_and_paginated(repo):
    for i in range(12):
        _create(repo, f"user{i}")

    first = repo.list(PageQuery(page=1, limit=10))
    assert first.total_results == 12
    assert first.total_pages == 2
    assert first.page == 1
    assert [u.username for u in first.users] == [f"user{i}" for i in range(11, 1, -1)]

    second = repo.list(PageQuery(page=2, limit=10))
    assert [u.username for u in second.users] == ["user1", "user0"]


def test_list_zero_limit_returns_everyone(repo):
    for i in range(12):
        _create(repo, f"user{i}")

    result = repo.list(PageQuery(page=1, limit=0))
    assert len(result.users) == 12
    assert result.total_results == repo.count() == 12
    assert result.total_pages == 1
    assert result.page == 1


def test_list_page_overflow_is_not_found(repo):
    for i in range(10):
        _create(repo, f"user{i}")

    with pytest.raises(NotFound):
        repo.list(PageQuery(page=2, limit=10))


def test_list_empty_directory(repo):
    result = repo.list()
    assert result.users == []
    assert result.total_results == 0
    assert result.total_pages == 1


def test_update_leaves_omitted_fields(repo):
    user = _create(repo, "alice", name="Alice", bio="old bio")

    updated = repo.update(user.id, ProfileUpdate(bio="new bio"))

    assert updated.bio == "new bio"
    assert updated.name == "Alice"
    assert updated.username == "alice"
    assert updated.created_at == user.created_at
    assert valid_password("secret1", repo.get_credentials("alice").hash, repo.get_credentials("alice").salt)


def test_update_username_and_password(repo):
    user = _create(repo, "alice")
    before = repo.get_credentials("alice")

    repo.update(user.id, ProfileUpdate(username="alicia", password="newpass"))

    assert repo.find_by_username("alice") is None
    after = repo.get_credentials("alicia")
    assert after.salt != before.salt
    assert valid_password("newpass", after.hash, after.salt)
    assert not valid_password("secret1", after.hash, after.salt)


def test_update_username_conflicts_only_with_other_users(repo):
    alice = _create(repo, "alice")
    _create(repo, "bob")

    with pytest.raises(UsernameTaken):
        repo.update(alice.id, ProfileUpdate(username="bob"))

    assert repo.update(alice.id, ProfileUpdate(username="alice", bio="same name")).bio == "same name"


def test_update_blank_avatar_restores_default(repo):
    user = _create(repo, "alice", avatar_url="https://img.example/a.png")
    assert user.avatar_url == "https://img.example/a.png"

    assert repo.update(user.id, ProfileUpdate(avatar_url="")).avatar_url == DEFAULT_AVATAR_URL


def test_update_and_delete_missing_user(repo):
    with pytest.raises(NotFound):
        repo.update("missing", ProfileUpdate(bio="x"))
    with pytest.raises(NotFound):
        repo.delete("missing")


def test_delete_is_hard(repo):
    user = _create(repo, "alice")
    repo.delete(user.id)

    assert repo.find_by_id(user.id) is None
    assert repo.count() == 0
    # Username is free again once the record is gone
    assert _create(repo, "alice").id != user.id


def test_update_unique_index_catches_race(repo, monkeypatch):
    alice = _create(repo, "alice")
    _create(repo, "bob")
    # Skip the pre-check so the rename reaches the unique index.
    monkeypatch.setattr(UserRepository, "_get_by_username", lambda self, session, username: None)

    with pytest.raises(UsernameConstraintViolation) as excinfo:
        repo.update(alice.id, ProfileUpdate(username="bob"))
    assert isinstance(excinfo.value, UsernameTaken)
    assert repo.find_by_id(alice.id).username == "alice"


def test_update_blank_name_clears_it(repo):
    user = _create(repo, "alice", name="Alice")
    assert ProfileUpdate(name="  Al  ").name == "Al"

    assert repo.update(user.id, ProfileUpdate(name="   ")).name is None


def test_equal_timestamps_page_by_id(repo, monkeypatch):
    monkeypatch.setattr(user_repository, "datetime", _FrozenClock)
    for i in range(5):
        _create(repo, f"user{i}")

    pages = [repo.list(PageQuery(page=page, limit=2)).users for page in (1, 2, 3)]
    ids = [user.id for page in pages for user in page]

    assert len(ids) == len(set(ids)) == 5
    assert ids == sorted(ids, reverse=True)
