# ordercache/services/order_identity.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ordercache.services.order_errors import TemporaryIdentityError


@dataclass(frozen=True)
class TemporaryID:
    """新分配、尚未提交的记录：slot 为存储内递增的槽位号。"""

    slot: int


@dataclass(frozen=True)
class PermanentID:
    """已提交记录：key 为存储主键。"""

    key: int


Identity = Union[TemporaryID, PermanentID]


def is_permanent(identity: Identity) -> bool:
    return isinstance(identity, PermanentID)


def require_permanent(identity: Identity) -> PermanentID:
    if isinstance(identity, PermanentID):
        return identity
    raise TemporaryIdentityError(f"record still has a temporary identity (slot={identity.slot})")
