# ordercache/db/engine.py
# 统一引擎工厂：SQLite 打开外键约束；PostgreSQL 统一到 psycopg3
from __future__ import annotations

import re
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from ordercache.db.base import Base, init_models

__all__ = ["create_all", "create_engine_for", "make_session_factory", "normalize_dsn"]


def normalize_dsn(url: str) -> str:
    """postgres/postgresql(+asyncpg) → postgresql+psycopg；其他原样返回。"""
    if url.startswith("postgresql+asyncpg://") or url.startswith("postgres+asyncpg://"):
        return re.sub(r"^postgres(?:ql)?\+asyncpg://", "postgresql+psycopg://", url)
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg://", 1)
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def _connect_args_for(url_str: str) -> dict[str, Any]:
    backend = make_url(url_str).get_backend_name()
    if backend.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()


def create_engine_for(url_str: str, *, echo: bool = False, **extra: Any) -> Engine:
    url_str = normalize_dsn(url_str)
    u = make_url(url_str)

    kwargs: dict[str, Any] = {"echo": echo, "future": True}
    if u.get_backend_name().startswith("postgresql"):
        kwargs["pool_pre_ping"] = True
    connect_args = _connect_args_for(url_str)
    if connect_args:
        kwargs["connect_args"] = connect_args
    kwargs.update(extra)

    engine = create_engine(url_str, **kwargs)
    if u.get_backend_name().startswith("sqlite"):
        _enable_sqlite_foreign_keys(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    # expire_on_commit=False：upsert 逐条提交后，交还给调用方的对象仍可直接读取
    return sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        expire_on_commit=False,
    )


def create_all(engine: Engine) -> None:
    init_models()
    Base.metadata.create_all(bind=engine)
