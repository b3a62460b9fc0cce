# ordercache/services/order_queries.py
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from ordercache.models import (
    Order,
    OrderCoupon,
    OrderItem,
    OrderItemTax,
    OrderRefundCondensed,
    ShippingLine,
    ShippingLineTax,
)


def load_order(db: Session, site_id: int, order_id: int) -> Optional[Order]:
    stmt = select(Order).where(Order.site_id == site_id, Order.order_id == order_id).limit(1)
    return db.execute(stmt).scalars().first()


def load_orders(db: Session, site_id: int, *, include_search_results: bool = False) -> List[Order]:
    stmt = select(Order).where(Order.site_id == site_id)
    if not include_search_results:
        stmt = stmt.where(Order.exclusive_for_search.is_(False))
    stmt = stmt.order_by(Order.date_created.desc(), Order.order_id.desc())
    return list(db.execute(stmt).scalars().all())


def count_orders(db: Session, site_id: Optional[int] = None) -> int:
    stmt = select(func.count()).select_from(Order)
    if site_id is not None:
        stmt = stmt.where(Order.site_id == site_id)
    return int(db.execute(stmt).scalar_one())


def load_order_item(db: Session, site_id: int, item_id: int) -> Optional[OrderItem]:
    stmt = select(OrderItem).where(OrderItem.site_id == site_id, OrderItem.item_id == item_id).limit(1)
    return db.execute(stmt).scalars().first()


def load_order_item_tax(db: Session, item_id: int, tax_id: int) -> Optional[OrderItemTax]:
    stmt = (
        select(OrderItemTax)
        .join(OrderItem, OrderItemTax.order_item_pk == OrderItem.id)
        .where(OrderItem.item_id == item_id, OrderItemTax.tax_id == tax_id)
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def load_shipping_line(db: Session, site_id: int, shipping_id: int) -> Optional[ShippingLine]:
    stmt = (
        select(ShippingLine)
        .where(ShippingLine.site_id == site_id, ShippingLine.shipping_id == shipping_id)
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def load_shipping_line_tax(db: Session, shipping_id: int, tax_id: int) -> Optional[ShippingLineTax]:
    stmt = (
        select(ShippingLineTax)
        .join(ShippingLine, ShippingLineTax.shipping_line_pk == ShippingLine.id)
        .where(ShippingLine.shipping_id == shipping_id, ShippingLineTax.tax_id == tax_id)
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def load_order_coupon(db: Session, site_id: int, coupon_id: int) -> Optional[OrderCoupon]:
    stmt = select(OrderCoupon).where(OrderCoupon.site_id == site_id, OrderCoupon.coupon_id == coupon_id).limit(1)
    return db.execute(stmt).scalars().first()


def load_order_refund_condensed(db: Session, site_id: int, refund_id: int) -> Optional[OrderRefundCondensed]:
    stmt = (
        select(OrderRefundCondensed)
        .where(OrderRefundCondensed.site_id == site_id, OrderRefundCondensed.refund_id == refund_id)
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def delete_orders(db: Session, site_id: int, *, keep_search_results: bool = True) -> int:
    """
    删除某站点的本地订单（同步重置时使用；upsert 用例从不删除）。

    逐条走 ORM 删除，子表靠 delete-orphan 级联，不依赖数据库外键行为。
    """
    stmt = select(Order).where(Order.site_id == site_id)
    if keep_search_results:
        stmt = stmt.where(Order.exclusive_for_search.is_(False))
    orders = db.execute(stmt).scalars().all()
    for order in orders:
        db.delete(order)
    db.flush()
    return len(orders)


__all__ = [
    "count_orders",
    "delete_orders",
    "load_order",
    "load_order_coupon",
    "load_order_item",
    "load_order_item_tax",
    "load_order_refund_condensed",
    "load_orders",
    "load_shipping_line",
    "load_shipping_line_tax",
]
