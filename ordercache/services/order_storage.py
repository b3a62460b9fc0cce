# ordercache/services/order_storage.py
from __future__ import annotations

import itertools
import logging
import weakref
from typing import Optional

from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ordercache.models.order import Order
from ordercache.services.order_errors import StorageConstraintError, StorageError
from ordercache.services.order_identity import Identity, PermanentID, TemporaryID

log = logging.getLogger("ordercache.orders")


class SqlOrderStorage:
    """
    OrderStorage 的 SQLAlchemy 实现。

    - flush_only=False（默认）：commit() 即 session.commit()，每条记录单独落盘
    - flush_only=True：commit() 只 flush，拿到主键（永久标识），事务由外层 UoW 提交

    失败时先回滚 session，再以 StorageError 抛出（保留原始异常链）。
    """

    def __init__(self, session: Session, *, flush_only: bool = False) -> None:
        self.session = session
        self.flush_only = flush_only
        self._slots = itertools.count(1)
        self._temporary: "weakref.WeakKeyDictionary[Order, int]" = weakref.WeakKeyDictionary()

    def find_by_key(self, site_id: int, order_id: int) -> Optional[Order]:
        # 先看本 session 里尚未落库的新对象
        for obj in self.session.new:
            if isinstance(obj, Order) and obj.site_id == site_id and obj.order_id == order_id:
                return obj

        stmt = (
            select(Order)
            .where(Order.site_id == site_id)
            .where(Order.order_id == order_id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def insert_new(self) -> Order:
        order = Order()
        self.session.add(order)
        self._temporary[order] = next(self._slots)
        return order

    def commit(self) -> None:
        try:
            if self.flush_only:
                self.session.flush()
            else:
                self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            log.warning("order storage constraint violation: %s", e.orig)
            raise StorageConstraintError(str(e.orig)) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            log.warning("order storage commit failed: %s", e)
            raise StorageError(str(e)) from e

    def identity_of(self, order: Order) -> Identity:
        state = inspect(order)
        if state.has_identity:
            return PermanentID(key=state.identity[0])
        # 未经本存储分配的对象：同样视为临时，槽位记 0（不占用递增序列）
        return TemporaryID(slot=self._temporary.get(order, 0))
