# ordercache/models/order_coupon.py
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordercache.db.base import Base
from ordercache.db.types import BigIntPK
from ordercache.schemas import order as ro

if TYPE_CHECKING:
    from ordercache.models.order import Order


class OrderCoupon(Base):
    __tablename__ = "order_coupons"
    __table_args__ = (UniqueConstraint("order_pk", "coupon_id", name="uq_order_coupons_order_coupon"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    order_pk: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    site_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    coupon_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    code: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    discount: Mapped[str] = mapped_column(String(32), nullable=False, default="")
    discount_tax: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    order: Mapped["Order"] = relationship("Order", back_populates="coupons")

    def update_with(self, remote: ro.OrderCouponLine) -> None:
        self.coupon_id = remote.coupon_id
        self.code = remote.code
        self.discount = remote.discount
        self.discount_tax = remote.discount_tax

    def to_read_only(self) -> ro.OrderCouponLine:
        return ro.OrderCouponLine(
            coupon_id=self.coupon_id,
            code=self.code,
            discount=self.discount,
            discount_tax=self.discount_tax,
        )
