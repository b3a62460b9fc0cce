# ordercache/schemas/order.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ordercache.models.enums import normalize_status

UTC = timezone.utc


# ===== 通用基类：不可变、允许从 ORM 读取、忽略多余字段 =====
class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True, extra="ignore")


def _to_utc(v: Optional[datetime]) -> Optional[datetime]:
    """naive 视为 UTC；aware 统一换算到 UTC。"""
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=UTC)
    return v.astimezone(UTC)


class Address(_Snapshot):
    first_name: str = ""
    last_name: str = ""
    company: Optional[str] = None
    address1: str = ""
    address2: Optional[str] = None
    city: str = ""
    state: str = ""
    postcode: str = ""
    country: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None


class OrderItemTax(_Snapshot):
    tax_id: int
    subtotal: str = ""
    total: str = ""


class OrderItem(_Snapshot):
    """订单行：item_id 为服务端行号，在同一站点内唯一。"""

    item_id: int
    name: str = ""
    product_id: int = 0
    variation_id: int = 0
    quantity: float = 0
    price: str = "0"
    sku: Optional[str] = None
    subtotal: str = ""
    subtotal_tax: str = ""
    tax_class: str = ""
    taxes: tuple[OrderItemTax, ...] = ()
    total: str = ""
    total_tax: str = ""

    @field_validator("price", mode="before")
    @classmethod
    def _price_as_str(cls, v):
        # 服务端偶尔下发数字，金额一律按字符串保存
        return v if isinstance(v, str) else str(v)


class ShippingLineTax(_Snapshot):
    tax_id: int
    subtotal: str = ""
    total: str = ""


class ShippingLine(_Snapshot):
    shipping_id: int
    method_title: str = ""
    method_id: str = ""
    total: str = ""
    total_tax: str = ""
    taxes: tuple[ShippingLineTax, ...] = ()


class OrderCouponLine(_Snapshot):
    coupon_id: int
    code: str = ""
    discount: str = ""
    discount_tax: str = ""


class OrderRefundCondensed(_Snapshot):
    refund_id: int
    reason: Optional[str] = None
    total: str = ""


class RemoteOrder(_Snapshot):
    """
    服务端订单快照（只读）。

    - 匹配键：(site_id, order_id)
    - 金额保持服务端下发的字符串形式，不转 float
    - 时间统一为 tz-aware UTC
    """

    site_id: int
    order_id: int = Field(ge=0)
    parent_id: int = 0
    customer_id: int = 0
    number: str = ""
    status: str = ""
    currency: str = ""
    customer_note: Optional[str] = None

    date_created: datetime
    date_modified: datetime
    date_paid: Optional[datetime] = None

    discount_total: str = ""
    discount_tax: str = ""
    shipping_total: str = ""
    shipping_tax: str = ""
    total: str = ""
    total_tax: str = ""
    payment_method_title: str = ""

    billing_address: Optional[Address] = None
    shipping_address: Optional[Address] = None

    items: tuple[OrderItem, ...] = ()
    shipping_lines: tuple[ShippingLine, ...] = ()
    coupons: tuple[OrderCouponLine, ...] = ()
    refunds: tuple[OrderRefundCondensed, ...] = ()

    @field_validator("status", mode="before")
    @classmethod
    def _norm_status(cls, v):
        return normalize_status(v)

    @field_validator("date_created", "date_modified", "date_paid")
    @classmethod
    def _utc(cls, v):
        return _to_utc(v)

    @property
    def key(self) -> tuple[int, int]:
        return (self.site_id, self.order_id)


__all__ = [
    "Address",
    "OrderCouponLine",
    "OrderItem",
    "OrderItemTax",
    "OrderRefundCondensed",
    "RemoteOrder",
    "ShippingLine",
    "ShippingLineTax",
]
