from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Make the trailsocial package importable when running from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from trailsocial.core import config as core_config  # noqa: E402
from trailsocial.db.session import Store  # noqa: E402
from trailsocial.services.account_service import AccountService  # noqa: E402


@pytest.fixture()
def store(tmp_path, monkeypatch):
    """Temporary SQLite store with a fresh schema; fully torn down afterwards."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()

    db = Store.from_settings().open()
    db.drop_all()
    db.create_all()

    yield db

    try:
        db.drop_all()
    finally:
        db.close()
        core_config.get_settings.cache_clear()


@pytest.fixture()
def service(store):
    return AccountService(store)


@pytest.fixture()
def make_user(service):
    def _make(username: str, password: str = "secret1", **extra):
        return service.register({"username": username, "password": password, **extra})

    return _make
