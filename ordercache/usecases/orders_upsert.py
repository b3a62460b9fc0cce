# -*- coding: utf-8 -*-
# ordercache/usecases/orders_upsert.py
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Set, TypeVar

from ordercache.models.order import Order
from ordercache.models.order_coupon import OrderCoupon
from ordercache.models.order_item import OrderItem, OrderItemTax
from ordercache.models.order_refund import OrderRefundCondensed
from ordercache.models.shipping_line import ShippingLine, ShippingLineTax
from ordercache.ports import OrderStorage
from ordercache.schemas.order import RemoteOrder
from ordercache.services.order_identity import require_permanent

log = logging.getLogger("ordercache.orders")

C = TypeVar("C")


class OrdersUpsertUseCase:
    """
    远端订单 → 本地缓存（插入或更新）。

    对每条 RemoteOrder 按输入顺序：
      1) 按 (site_id, order_id) 查找本地记录，没有则分配新记录（临时标识）
      2) 整体覆盖远端携带的字段；子集合按各自业务键对齐，缺席的子记录删除
      3) 提交；新记录在此由临时标识变为永久标识

    返回与输入按位置一一对应的本地记录，且全部持有永久标识。
    提交失败（StorageError）直接抛出，不回滚已提交的记录，也不重试。
    """

    def __init__(self, storage: OrderStorage) -> None:
        self.storage = storage

    def upsert(self, remote_orders: Sequence[RemoteOrder]) -> List[Order]:
        stored: List[Order] = []
        created = 0
        for remote in remote_orders:
            order = self.storage.find_by_key(remote.site_id, remote.order_id)
            if order is None:
                order = self.storage.insert_new()
                created += 1

            order.update_with(remote)
            _handle_items(order, remote)
            _handle_shipping_lines(order, remote)
            _handle_coupons(order, remote)
            _handle_refunds(order, remote)

            self.storage.commit()
            require_permanent(self.storage.identity_of(order))
            stored.append(order)

        log.debug("orders upserted: total=%d created=%d", len(stored), created)
        return stored


def _reconcile(
    current: Iterable[C],
    remotes: Sequence[Any],
    *,
    key: str,
    factory: Callable[[], C],
    site_id: Optional[int] = None,
    after: Optional[Callable[[C, Any], None]] = None,
) -> List[C]:
    """
    子集合按业务键对齐：命中则原地更新，未命中则新建；结果顺序 = 远端顺序。
    不在结果里的旧子记录由 delete-orphan 级联删除。同键重复时后者覆盖前者。
    """
    by_key = {getattr(c, key): c for c in current}
    result: List[C] = []
    placed: Set[Any] = set()
    for pos, remote in enumerate(remotes):
        k = getattr(remote, key)
        child = by_key.get(k)
        if child is None:
            child = factory()
            by_key[k] = child
        child.update_with(remote)
        child.position = pos
        if site_id is not None:
            child.site_id = site_id
        if after is not None:
            after(child, remote)
        if k not in placed:
            placed.add(k)
            result.append(child)
    return result


def _handle_items(order: Order, remote: RemoteOrder) -> None:
    def _taxes(item: OrderItem, remote_item) -> None:
        item.taxes = _reconcile(item.taxes, remote_item.taxes, key="tax_id", factory=OrderItemTax)

    order.items = _reconcile(
        order.items,
        remote.items,
        key="item_id",
        factory=OrderItem,
        site_id=remote.site_id,
        after=_taxes,
    )


def _handle_shipping_lines(order: Order, remote: RemoteOrder) -> None:
    def _taxes(line: ShippingLine, remote_line) -> None:
        line.taxes = _reconcile(line.taxes, remote_line.taxes, key="tax_id", factory=ShippingLineTax)

    order.shipping_lines = _reconcile(
        order.shipping_lines,
        remote.shipping_lines,
        key="shipping_id",
        factory=ShippingLine,
        site_id=remote.site_id,
        after=_taxes,
    )


def _handle_coupons(order: Order, remote: RemoteOrder) -> None:
    order.coupons = _reconcile(
        order.coupons,
        remote.coupons,
        key="coupon_id",
        factory=OrderCoupon,
        site_id=remote.site_id,
    )


def _handle_refunds(order: Order, remote: RemoteOrder) -> None:
    order.refunds = _reconcile(
        order.refunds,
        remote.refunds,
        key="refund_id",
        factory=OrderRefundCondensed,
        site_id=remote.site_id,
    )
