"""
Store lifecycle and fault mapping.
"""
from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from trailsocial.core.errors import StoreUnavailable
from trailsocial.db.session import (
    FOREIGN_KEY_VIOLATION,
    UNIQUE_VIOLATION,
    Store,
    integrity_violation_kind,
)
from trailsocial.repositories.user_repository import UserRepository


def test_store_requires_url():
    with pytest.raises(RuntimeError):
        Store("")


def test_store_must_be_opened(tmp_path):
    store = Store(f"sqlite:///{tmp_path / 'closed.db'}")
    assert not store.is_open
    with pytest.raises(RuntimeError):
        with store.session():
            pass


def test_store_context_manager_closes(tmp_path):
    with Store(f"sqlite:///{tmp_path / 'ctx.db'}") as store:
        store.create_all()
        assert store.is_open
        assert UserRepository(store).count() == 0
    assert not store.is_open


def test_unreachable_store_raises_store_unavailable(tmp_path):
    missing_dir = tmp_path / "missing" / "nowhere.db"
    with Store(f"sqlite:///{missing_dir}") as store:
        with pytest.raises(StoreUnavailable):
            UserRepository(store).count()


class _DriverError(Exception):
    def __init__(self, message, pgcode=None):
        super().__init__(message)
        self.pgcode = pgcode


@pytest.mark.parametrize(
    "orig, expected",
    [
        (_DriverError("UNIQUE constraint failed: users.username"), UNIQUE_VIOLATION),
        (_DriverError("FOREIGN KEY constraint failed"), FOREIGN_KEY_VIOLATION),
        (_DriverError('duplicate key value violates "uq_follows_pair"', pgcode="23505"), UNIQUE_VIOLATION),
        (_DriverError('insert violates "follows_followed_id_fkey"', pgcode="23503"), FOREIGN_KEY_VIOLATION),
        (_DriverError("NOT NULL constraint failed: users.hash"), None),
    ],
)
def test_integrity_violation_kind(orig, expected):
    exc = IntegrityError("INSERT ...", {}, orig)
    assert integrity_violation_kind(exc) == expected
