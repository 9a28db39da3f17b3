"""Utility script to create the initial database schema."""
from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from trailsocial.core.config import get_settings
from .session import Store


def create_all(store: Store | None = None) -> None:
    if store is not None:
        store.create_all()
        return
    with Store.from_settings(get_settings()) as owned:
        owned.create_all()


if __name__ == "__main__":
    try:
        create_all()
        print("Database tables created successfully.")
    except (SQLAlchemyError, RuntimeError) as exc:
        raise SystemExit(f"Failed to create tables: {exc}") from exc
