# ordercache/models/enums.py
from __future__ import annotations

from enum import StrEnum


class OrderStatus(StrEnum):
    """
    店铺侧已知的订单状态（slug 与服务端一致）。

    注意：
    - 站点可以注册自定义状态，status 列保存任意 slug，不强制落在本枚举内
    - 本枚举只用于识别 / 展示分组
    """

    PENDING = "pending"
    PROCESSING = "processing"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"
    FAILED = "failed"
    CHECKOUT_DRAFT = "checkout-draft"


_KNOWN = {s.value for s in OrderStatus}


def normalize_status(value: str | None) -> str:
    """去空白 + 小写；自定义状态原样保留。"""
    return (value or "").strip().lower()


def is_known_status(value: str | None) -> bool:
    return normalize_status(value) in _KNOWN
