# ordercache/models/shipping_line.py
from __future__ import annotations

from typing import TYPE_CHECKING, List

from sqlalchemy import BigInteger, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordercache.db.base import Base
from ordercache.db.types import BigIntPK
from ordercache.schemas import order as ro

if TYPE_CHECKING:
    from ordercache.models.order import Order


class ShippingLine(Base):
    __tablename__ = "order_shipping_lines"
    __table_args__ = (
        UniqueConstraint("order_pk", "shipping_id", name="uq_order_shipping_lines_order_shipping"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    order_pk: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    site_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    shipping_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    method_title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    method_id: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    total: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    total_tax: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    order: Mapped["Order"] = relationship("Order", back_populates="shipping_lines")
    taxes: Mapped[List["ShippingLineTax"]] = relationship(
        "ShippingLineTax",
        back_populates="shipping_line",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ShippingLineTax.position",
        lazy="selectin",
    )

    def update_with(self, remote: ro.ShippingLine) -> None:
        self.shipping_id = remote.shipping_id
        self.method_title = remote.method_title
        self.method_id = remote.method_id
        self.total = remote.total
        self.total_tax = remote.total_tax

    def to_read_only(self) -> ro.ShippingLine:
        return ro.ShippingLine(
            shipping_id=self.shipping_id,
            method_title=self.method_title,
            method_id=self.method_id,
            total=self.total,
            total_tax=self.total_tax,
            taxes=tuple(t.to_read_only() for t in self.taxes),
        )

    def __repr__(self) -> str:
        return f"<ShippingLine id={self.id} order_pk={self.order_pk} shipping_id={self.shipping_id}>"


class ShippingLineTax(Base):
    __tablename__ = "order_shipping_line_taxes"
    __table_args__ = (
        UniqueConstraint("shipping_line_pk", "tax_id", name="uq_order_shipping_line_taxes_line_tax"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    shipping_line_pk: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("order_shipping_lines.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tax_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    subtotal: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    total: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    shipping_line: Mapped["ShippingLine"] = relationship("ShippingLine", back_populates="taxes")

    def update_with(self, remote: ro.ShippingLineTax) -> None:
        self.tax_id = remote.tax_id
        self.subtotal = remote.subtotal
        self.total = remote.total

    def to_read_only(self) -> ro.ShippingLineTax:
        return ro.ShippingLineTax(tax_id=self.tax_id, subtotal=self.subtotal, total=self.total)
