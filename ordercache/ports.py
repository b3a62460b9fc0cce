# -*- coding: utf-8 -*-
# ordercache/ports.py
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ordercache.models.order import Order
    from ordercache.schemas.order import RemoteOrder
    from ordercache.services.order_identity import Identity


class OrderStorage(Protocol):
    """upsert 用例依赖的存储端口：按业务键查找、分配新记录、提交。"""

    def find_by_key(self, site_id: int, order_id: int) -> Optional["Order"]: ...

    def insert_new(self) -> "Order": ...

    def commit(self) -> None: ...

    def identity_of(self, order: "Order") -> "Identity": ...


class RemoteOrderSource(Protocol):
    """远端订单分页来源（网络层实现，不在本包内）。"""

    def load_orders(
        self,
        site_id: int,
        page_number: int,
        page_size: int,
    ) -> Sequence["RemoteOrder"]: ...
