# ordercache/main.py
# 组装入口：读取配置 → 日志 → 引擎/建表 → 会话工厂 → 同步服务
from __future__ import annotations

import logging
from typing import Optional

from ordercache.core.config import AppSettings, get_settings
from ordercache.core.logging import setup_logging
from ordercache.db.engine import create_all, create_engine_for, make_session_factory
from ordercache.services.order_sync_service import OrderSyncService

logger = logging.getLogger("ordercache")


def build_sync_service(settings: Optional[AppSettings] = None) -> OrderSyncService:
    settings = settings or get_settings()
    setup_logging(settings.LOG_LEVEL)

    engine = create_engine_for(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    create_all(engine)
    logger.info("order cache ready: env=%s backend=%s", settings.ENV, engine.url.get_backend_name())

    return OrderSyncService(make_session_factory(engine), settings)
