# ordercache/db/types.py
from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.types import TypeDecorator

UTC = timezone.utc


class UTCDateTime(TypeDecorator):
    """
    统一 UTC 时间列：
    - 写入：tz-aware 转 UTC 后去掉 tzinfo（naive 视为 UTC）
    - 读出：补回 UTC tzinfo
    SQLite 不保存时区，这样读回的值与写入的快照可直接比较。
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, datetime) and value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


# SQLite 只对 INTEGER PRIMARY KEY 自增；PG 下仍用 BIGINT
BigIntPK = BigInteger().with_variant(Integer, "sqlite")
