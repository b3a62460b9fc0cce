# tests/factories.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ordercache.schemas.order import (
    Address,
    OrderItem,
    OrderItemTax,
    RemoteOrder,
    ShippingLine,
    ShippingLineTax,
)

UTC = timezone.utc

DEFAULT_SITE_ID = 10


def make_order(order_id: int = 0, site_id: int = DEFAULT_SITE_ID, **overrides: Any) -> RemoteOrder:
    data: dict[str, Any] = {
        "site_id": site_id,
        "order_id": order_id,
        "parent_id": 0,
        "customer_id": 0,
        "number": str(order_id),
        "status": "pending",
        "currency": "USD",
        "customer_note": None,
        "date_created": datetime(2026, 3, 1, 9, 30, tzinfo=UTC),
        "date_modified": datetime(2026, 3, 2, 10, 0, tzinfo=UTC),
        "date_paid": None,
        "discount_total": "0.00",
        "discount_tax": "0.00",
        "shipping_total": "0.00",
        "shipping_tax": "0.00",
        "total": "0.00",
        "total_tax": "0.00",
        "payment_method_title": "",
    }
    data.update(overrides)
    return RemoteOrder(**data)


def make_order_item(item_id: int, *, taxes: tuple[OrderItemTax, ...] = (), **overrides: Any) -> OrderItem:
    data: dict[str, Any] = {
        "item_id": item_id,
        "name": f"Item {item_id}",
        "product_id": 100 + item_id,
        "quantity": 1,
        "price": "9.99",
        "subtotal": "9.99",
        "total": "9.99",
        "taxes": taxes,
    }
    data.update(overrides)
    return OrderItem(**data)


def make_shipping_line(shipping_id: int, *, taxes: tuple[ShippingLineTax, ...] = ()) -> ShippingLine:
    return ShippingLine(
        shipping_id=shipping_id,
        method_title="Flat rate",
        method_id="flat_rate",
        total="2.10",
        total_tax="0.80",
        taxes=taxes,
    )


def make_address(**overrides: Any) -> Address:
    data: dict[str, Any] = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address1": "12 Analytical St",
        "city": "London",
        "postcode": "N1 9GU",
        "country": "GB",
        "email": "ada@example.com",
    }
    data.update(overrides)
    return Address(**data)
