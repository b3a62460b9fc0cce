# ordercache/models/order_item.py
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import BigInteger, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordercache.db.base import Base
from ordercache.db.types import BigIntPK
from ordercache.schemas import order as ro

if TYPE_CHECKING:
    from ordercache.models.order import Order


class OrderItem(Base):
    __tablename__ = "order_items"
    __table_args__ = (UniqueConstraint("order_pk", "item_id", name="uq_order_items_order_item"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    order_pk: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    site_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    item_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    product_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    variation_id: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    quantity: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    price: Mapped[str] = mapped_column(String(32), nullable=False, default="0")
    sku: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    subtotal: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    subtotal_tax: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    tax_class: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    total: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    total_tax: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    order: Mapped["Order"] = relationship("Order", back_populates="items")
    taxes: Mapped[List["OrderItemTax"]] = relationship(
        "OrderItemTax",
        back_populates="item",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="OrderItemTax.position",
        lazy="selectin",
    )

    def update_with(self, remote: ro.OrderItem) -> None:
        self.item_id = remote.item_id
        self.name = remote.name
        self.product_id = remote.product_id
        self.variation_id = remote.variation_id
        self.quantity = remote.quantity
        self.price = remote.price
        self.sku = remote.sku
        self.subtotal = remote.subtotal
        self.subtotal_tax = remote.subtotal_tax
        self.tax_class = remote.tax_class
        self.total = remote.total
        self.total_tax = remote.total_tax

    def to_read_only(self) -> ro.OrderItem:
        return ro.OrderItem(
            item_id=self.item_id,
            name=self.name,
            product_id=self.product_id,
            variation_id=self.variation_id,
            quantity=self.quantity,
            price=self.price,
            sku=self.sku,
            subtotal=self.subtotal,
            subtotal_tax=self.subtotal_tax,
            tax_class=self.tax_class,
            taxes=tuple(t.to_read_only() for t in self.taxes),
            total=self.total,
            total_tax=self.total_tax,
        )

    def __repr__(self) -> str:
        return f"<OrderItem id={self.id} order_pk={self.order_pk} item_id={self.item_id}>"


class OrderItemTax(Base):
    __tablename__ = "order_item_taxes"
    __table_args__ = (UniqueConstraint("order_item_pk", "tax_id", name="uq_order_item_taxes_item_tax"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    order_item_pk: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("order_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tax_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    subtotal: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    total: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    item: Mapped["OrderItem"] = relationship("OrderItem", back_populates="taxes")

    def update_with(self, remote: ro.OrderItemTax) -> None:
        self.tax_id = remote.tax_id
        self.subtotal = remote.subtotal
        self.total = remote.total

    def to_read_only(self) -> ro.OrderItemTax:
        return ro.OrderItemTax(tax_id=self.tax_id, subtotal=self.subtotal, total=self.total)
