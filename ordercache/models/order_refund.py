# ordercache/models/order_refund.py
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import BigInteger, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ordercache.db.base import Base
from ordercache.db.types import BigIntPK
from ordercache.schemas import order as ro

if TYPE_CHECKING:
    from ordercache.models.order import Order


class OrderRefundCondensed(Base):
    """订单上的退款摘要（完整退款单由退款用例另行同步）。"""

    __tablename__ = "order_refunds_condensed"
    __table_args__ = (UniqueConstraint("order_pk", "refund_id", name="uq_order_refunds_condensed_order_refund"),)

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    order_pk: Mapped[int] = mapped_column(
        BigInteger,
        ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    site_id: Mapped[int] = mapped_column(BigInteger, nullable=False)
    refund_id: Mapped[int] = mapped_column(BigInteger, nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    reason: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    total: Mapped[str] = mapped_column(String(32), nullable=False, default="")

    order: Mapped["Order"] = relationship("Order", back_populates="refunds")

    def update_with(self, remote: ro.OrderRefundCondensed) -> None:
        self.refund_id = remote.refund_id
        self.reason = remote.reason
        self.total = remote.total

    def to_read_only(self) -> ro.OrderRefundCondensed:
        return ro.OrderRefundCondensed(refund_id=self.refund_id, reason=self.reason, total=self.total)
