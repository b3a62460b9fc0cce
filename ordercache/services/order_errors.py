# ordercache/services/order_errors.py
from __future__ import annotations


class StorageError(Exception):
    """持久化失败（提交失败、存储不可用等），直接抛给 upsert 的调用方。"""


class StorageConstraintError(StorageError):
    """违反唯一约束 / 外键等完整性约束。"""


class TemporaryIdentityError(StorageError):
    """记录在交还调用方时仍是临时标识。"""
