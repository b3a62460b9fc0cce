# ordercache/models/__init__.py
"""
统一导出 ORM 模型。

按需（首次访问属性时）导入，避免 schemas ↔ models 的循环导入。
"""

from importlib import import_module

MODEL_SPECS = {
    "Order": "ordercache.models.order",
    "OrderItem": "ordercache.models.order_item",
    "OrderItemTax": "ordercache.models.order_item",
    "ShippingLine": "ordercache.models.shipping_line",
    "ShippingLineTax": "ordercache.models.shipping_line",
    "OrderCoupon": "ordercache.models.order_coupon",
    "OrderRefundCondensed": "ordercache.models.order_refund",
}


def __getattr__(name: str):
    module_name = MODEL_SPECS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    value = getattr(import_module(module_name), name)
    globals()[name] = value
    return value


__all__ = sorted(MODEL_SPECS)
