# ordercache/db/__init__.py
from __future__ import annotations

from ordercache.db.base import Base, init_models
from ordercache.db.engine import create_all, create_engine_for, make_session_factory
from ordercache.db.uow import UoW

__all__ = [
    "Base",
    "UoW",
    "create_all",
    "create_engine_for",
    "init_models",
    "make_session_factory",
]
