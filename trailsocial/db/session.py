"""Engine/session lifecycle for the SQL store."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DisconnectionError, IntegrityError, InterfaceError, OperationalError
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from trailsocial.core.config import Settings, get_settings
from trailsocial.core.errors import StoreUnavailable

Base = declarative_base()

logger = logging.getLogger(__name__)


UNIQUE_VIOLATION = "unique"
FOREIGN_KEY_VIOLATION = "foreign_key"

# SQLSTATE classes reported by Postgres drivers
_PG_CODES = {"23505": UNIQUE_VIOLATION, "23503": FOREIGN_KEY_VIOLATION}


def integrity_violation_kind(exc: IntegrityError) -> str | None:
    """Classify an IntegrityError as a unique or foreign-key failure, else None."""
    orig = getattr(exc, "orig", None)
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code in _PG_CODES:
        return _PG_CODES[code]
    message = str(orig or exc).upper()
    if "FOREIGN KEY" in message:
        return FOREIGN_KEY_VIOLATION
    if "UNIQUE" in message or "DUPLICATE KEY" in message:
        return UNIQUE_VIOLATION
    return None


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Store:
    """
    Explicitly constructed database handle.

    Owns one engine and its session factory. Repositories receive a Store in
    their constructor; nothing in the package keeps a module-level engine.
    """

    def __init__(self, url: str, *, echo: bool = False) -> None:
        url = (url or "").strip()
        if not url:
            raise RuntimeError("DATABASE_URL must be configured to use the SQL store.")
        self.url = url
        self.echo = echo
        self._engine: Engine | None = None
        self._sessionmaker: sessionmaker | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Store":
        settings = settings or get_settings()
        return cls(settings.database_url, echo=settings.sql_echo)

    # -------------------------- lifecycle --------------------------
    def open(self) -> "Store":
        if self._engine is not None:
            return self
        engine = create_engine(self.url, echo=self.echo, future=True, pool_pre_ping=True)
        if engine.dialect.name == "sqlite":
            event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        self._engine = engine
        self._sessionmaker = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
        logger.debug("Opened store %s", engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        self._sessionmaker = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Store is not open; call Store.open() first.")
        return self._engine

    def __enter__(self) -> "Store":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------- schema --------------------------
    def create_all(self) -> None:
        from . import models  # noqa: F401  # ensure models are imported for metadata

        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        from . import models  # noqa: F401

        Base.metadata.drop_all(bind=self.engine)

    # -------------------------- sessions --------------------------
    @contextmanager
    def session(self) -> Iterator[Session]:
        if self._sessionmaker is None:
            raise RuntimeError("Store is not open; call Store.open() first.")
        session: Session = self._sessionmaker()
        try:
            yield session
        except (OperationalError, InterfaceError, DisconnectionError) as exc:
            session.rollback()
            logger.error("Store fault: %s", exc)
            raise StoreUnavailable() from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
