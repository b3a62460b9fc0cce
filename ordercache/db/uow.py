# ordercache/db/uow.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from sqlalchemy.orm import Session


@dataclass
class UoW:
    """轻量事务边界：进入提交/异常回滚；支持传入外部 Session（外部 Session 不由本对象提交）。"""

    session_factory: Callable[[], Session] | None = None
    db: Session | None = None
    _own: bool = False

    def __enter__(self) -> "UoW":
        if self.db is None:
            if self.session_factory is None:
                raise ValueError("UoW requires session_factory or db")
            self.db = self.session_factory()
            self._own = True
        return self

    def __exit__(self, exc_type, *_):
        if self._own and self.db is not None:
            try:
                if exc_type is None:
                    self.db.commit()
                else:
                    self.db.rollback()
            finally:
                self.db.close()
                self.db = None
                self._own = False
