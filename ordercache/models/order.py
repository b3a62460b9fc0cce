# ordercache/models/order.py
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import JSON, BigInteger, Boolean, Index, String, Text, UniqueConstraint, false
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordercache.db.base import Base
from ordercache.db.types import BigIntPK, UTCDateTime
from ordercache.schemas.order import Address, RemoteOrder

if TYPE_CHECKING:
    from ordercache.models.order_coupon import OrderCoupon
    from ordercache.models.order_item import OrderItem
    from ordercache.models.order_refund import OrderRefundCondensed
    from ordercache.models.shipping_line import ShippingLine


class Order(Base):
    """
    本地订单缓存（LocalOrder）

    - 业务键：(site_id, order_id)，唯一约束 uq_orders_site_order
    - id 为存储内部主键：提交前对象尚无 id（临时标识），提交/flush 后即为永久标识
    - exclusive_for_search 仅由搜索用例维护，upsert 不触碰
    """

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("site_id", "order_id", name="uq_orders_site_order"),
        Index("ix_orders_site_status", "site_id", "status"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)

    # 业务键
    site_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    order_id: Mapped[int] = mapped_column(BigInteger, nullable=False)

    parent_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    customer_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    number: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    status: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    currency: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    customer_note: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    date_created: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    date_modified: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)
    date_paid: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    # 金额：保持服务端字符串
    discount_total: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    discount_tax: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    shipping_total: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    shipping_tax: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    total: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    total_tax: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    payment_method_title: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    billing_address: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)
    shipping_address: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    exclusive_for_search: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    # 关系：订单 ↔ 明细（按 position 保持服务端顺序）
    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItem.position",
        lazy="selectin",
    )
    shipping_lines: Mapped[List["ShippingLine"]] = relationship(
        "ShippingLine",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ShippingLine.position",
        lazy="selectin",
    )
    coupons: Mapped[List["OrderCoupon"]] = relationship(
        "OrderCoupon",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderCoupon.position",
        lazy="selectin",
    )
    refunds: Mapped[List["OrderRefundCondensed"]] = relationship(
        "OrderRefundCondensed",
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderRefundCondensed.position",
        lazy="selectin",
    )

    def update_with(self, remote: RemoteOrder) -> None:
        """整体覆盖标量字段（不含子集合，子集合由 upsert 用例按键对齐）。"""
        self.site_id = remote.site_id
        self.order_id = remote.order_id
        self.parent_id = remote.parent_id
        self.customer_id = remote.customer_id
        self.number = remote.number
        self.status = remote.status
        self.currency = remote.currency
        self.customer_note = remote.customer_note
        self.date_created = remote.date_created
        self.date_modified = remote.date_modified
        self.date_paid = remote.date_paid
        self.discount_total = remote.discount_total
        self.discount_tax = remote.discount_tax
        self.shipping_total = remote.shipping_total
        self.shipping_tax = remote.shipping_tax
        self.total = remote.total
        self.total_tax = remote.total_tax
        self.payment_method_title = remote.payment_method_title
        self.billing_address = _dump_address(remote.billing_address)
        self.shipping_address = _dump_address(remote.shipping_address)

    def to_read_only(self) -> RemoteOrder:
        return RemoteOrder(
            site_id=self.site_id,
            order_id=self.order_id,
            parent_id=self.parent_id,
            customer_id=self.customer_id,
            number=self.number,
            status=self.status,
            currency=self.currency,
            customer_note=self.customer_note,
            date_created=self.date_created,
            date_modified=self.date_modified,
            date_paid=self.date_paid,
            discount_total=self.discount_total,
            discount_tax=self.discount_tax,
            shipping_total=self.shipping_total,
            shipping_tax=self.shipping_tax,
            total=self.total,
            total_tax=self.total_tax,
            payment_method_title=self.payment_method_title,
            billing_address=_load_address(self.billing_address),
            shipping_address=_load_address(self.shipping_address),
            items=tuple(i.to_read_only() for i in self.items),
            shipping_lines=tuple(s.to_read_only() for s in self.shipping_lines),
            coupons=tuple(c.to_read_only() for c in self.coupons),
            refunds=tuple(r.to_read_only() for r in self.refunds),
        )

    def __repr__(self) -> str:
        return (
            f"<Order id={self.id} site={self.site_id} order_id={self.order_id} "
            f"status={self.status!r}>"
        )


def _dump_address(addr: Optional[Address]) -> Optional[dict]:
    return addr.model_dump() if addr is not None else None


def _load_address(raw: Optional[dict]) -> Optional[Address]:
    return Address.model_validate(raw) if raw is not None else None
