"""Database helpers (store lifecycle and declarative base export)."""

from .session import Base, Store

__all__ = ["Base", "Store"]
