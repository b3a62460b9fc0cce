# ordercache/db/base.py
from __future__ import annotations

import importlib
import logging
from typing import Iterable, List, Set

from sqlalchemy.orm import DeclarativeBase, configure_mappers

log = logging.getLogger("ordercache.models")


class Base(DeclarativeBase):
    """全局唯一 ORM Base"""

    pass


_INITIALIZED: bool = False  # 防重复初始化

# 关系以字符串声明，目标类必须先注册；顺序即依赖顺序
_MODEL_MODULES = (
    "ordercache.models.order",
    "ordercache.models.order_item",
    "ordercache.models.shipping_line",
    "ordercache.models.order_coupon",
    "ordercache.models.order_refund",
)


def init_models(
    *,
    extra_modules: Iterable[str] | None = None,
    force: bool = False,
) -> None:
    """
    集中导入模型 + 固化关系映射：
      1) 按依赖顺序导入全部订单模型
      2) 再导入调用方追加的模块
      3) 最后统一 configure_mappers()

    模块导入失败直接抛出，缺表/缺类在启动时暴露。
    """
    global _INITIALIZED
    if _INITIALIZED and not force:
        log.debug("init_models() called again; already initialized, skipping.")
        return

    seen: Set[str] = set()
    loaded: List[str] = []
    for mod in (*_MODEL_MODULES, *(extra_modules or ())):
        if mod in seen:
            continue
        seen.add(mod)
        importlib.import_module(mod)
        loaded.append(mod)

    configure_mappers()
    _INITIALIZED = True
    log.info("ORM models initialized & mappers configured (loaded %d modules)", len(loaded))
