# ordercache/services/order_sync_service.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ordercache.core.config import AppSettings
from ordercache.db.uow import UoW
from ordercache.ports import RemoteOrderSource
from ordercache.schemas.order import RemoteOrder
from ordercache.services.order_errors import StorageError
from ordercache.services.order_queries import delete_orders
from ordercache.services.order_storage import SqlOrderStorage
from ordercache.usecases.orders_upsert import OrdersUpsertUseCase

log = logging.getLogger("ordercache.sync")


@dataclass(frozen=True)
class SyncResult:
    site_id: int
    page_number: int
    upserted: int
    deleted: int
    has_next_page: bool


class OrderSyncService:
    """
    订单同步（upsert 用例的调用方）：

    - 每页一个事务：upsert 使用 flush-only 存储，整页由 UoW 统一提交，失败整页回滚
    - reset=True 时，首页写入前先清掉该站点的本地订单（保留仅供搜索的记录）
    - 网络拉取由注入的 RemoteOrderSource 负责
    """

    def __init__(self, session_factory: Callable[[], Session], settings: AppSettings) -> None:
        self.session_factory = session_factory
        self.settings = settings

    def sync_page(
        self,
        site_id: int,
        page_number: int,
        orders: Sequence[RemoteOrder],
        *,
        reset: bool = False,
    ) -> SyncResult:
        foreign = [o.order_id for o in orders if o.site_id != site_id]
        if foreign:
            raise ValueError(f"orders {foreign} do not belong to site {site_id}")

        deleted = 0
        try:
            with UoW(self.session_factory) as uow:
                if reset and page_number == self.settings.FIRST_PAGE_NUMBER:
                    deleted = delete_orders(uow.db, site_id, keep_search_results=True)
                storage = SqlOrderStorage(uow.db, flush_only=True)
                stored = OrdersUpsertUseCase(storage).upsert(orders)
        except SQLAlchemyError as e:
            # UoW 提交阶段的失败（flush 阶段已由存储层转换）
            log.warning("order sync commit failed: site=%s page=%s err=%s", site_id, page_number, e)
            raise StorageError(str(e)) from e

        result = SyncResult(
            site_id=site_id,
            page_number=page_number,
            upserted=len(stored),
            deleted=deleted,
            has_next_page=len(orders) == self.settings.SYNC_PAGE_SIZE,
        )
        log.info(
            "orders synced: site=%s page=%s upserted=%s deleted=%s next=%s",
            site_id,
            page_number,
            result.upserted,
            result.deleted,
            result.has_next_page,
        )
        return result

    def synchronize(
        self,
        site_id: int,
        source: RemoteOrderSource,
        *,
        reset: bool = True,
    ) -> List[SyncResult]:
        results: List[SyncResult] = []
        page_number = self.settings.FIRST_PAGE_NUMBER
        for _ in range(self.settings.SYNC_MAX_PAGES):
            orders = source.load_orders(site_id, page_number, self.settings.SYNC_PAGE_SIZE)
            result = self.sync_page(site_id, page_number, orders, reset=reset)
            results.append(result)
            if not result.has_next_page:
                break
            page_number += 1
        else:
            log.warning("order sync stopped at max pages: site=%s pages=%s", site_id, len(results))
        return results
