# tests/conftest.py
from __future__ import annotations

from typing import Generator

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ordercache.core.config import AppSettings
from ordercache.db.engine import create_all, create_engine_for, make_session_factory
from ordercache.services.order_storage import SqlOrderStorage


# =========================================
# 每用例独立的内存库（StaticPool：同一连接，表结构跨 session 可见）
# =========================================
@pytest.fixture(scope="function")
def engine() -> Generator[Engine, None, None]:
    eng = create_engine_for("sqlite://", poolclass=StaticPool)
    create_all(eng)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture(scope="function")
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture(scope="function")
def session(session_factory) -> Generator[Session, None, None]:
    sess = session_factory()
    try:
        yield sess
    finally:
        sess.close()


@pytest.fixture
def storage(session: Session) -> SqlOrderStorage:
    return SqlOrderStorage(session)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(_env_file=None, DATABASE_URL="sqlite://", SYNC_PAGE_SIZE=2)
