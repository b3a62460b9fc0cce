# tests/services/test_orders_upsert_usecase.py
from __future__ import annotations

import pytest

from ordercache.schemas.order import (
    OrderCouponLine,
    OrderItemTax,
    OrderRefundCondensed,
    ShippingLineTax,
)
from ordercache.services.order_errors import StorageError, TemporaryIdentityError
from ordercache.services.order_identity import PermanentID, TemporaryID, is_permanent
from ordercache.services.order_queries import (
    count_orders,
    load_order,
    load_order_coupon,
    load_order_item,
    load_order_item_tax,
    load_order_refund_condensed,
    load_shipping_line,
    load_shipping_line_tax,
)
from ordercache.services.order_storage import SqlOrderStorage
from ordercache.usecases.orders_upsert import OrdersUpsertUseCase
from tests.factories import DEFAULT_SITE_ID, make_address, make_order, make_order_item, make_shipping_line


class _FailingStorage(SqlOrderStorage):
    """第 fail_on 次 commit 抛出 StorageError。"""

    def __init__(self, session, *, fail_on: int) -> None:
        super().__init__(session)
        self.fail_on = fail_on
        self.commits = 0

    def commit(self) -> None:
        self.commits += 1
        if self.commits == self.fail_on:
            self.session.rollback()
            raise StorageError("disk full")
        super().commit()


class _NeverPermanentStorage(SqlOrderStorage):
    """commit 什么都不做：记录始终停留在临时标识。"""

    def commit(self) -> None:
        return None


def test_it_inserts_orders_with_permanent_ids(session, storage):
    orders = [make_order(10, site_id=1), make_order(11, site_id=1)]

    stored = OrdersUpsertUseCase(storage).upsert(orders)

    assert len(stored) == 2
    for order in stored:
        assert isinstance(storage.identity_of(order), PermanentID)
    assert count_orders(session) == 2


def test_new_record_moves_from_temporary_to_permanent(storage):
    order = storage.insert_new()
    assert isinstance(storage.identity_of(order), TemporaryID)

    order.update_with(make_order(42))
    storage.commit()

    identity = storage.identity_of(order)
    assert is_permanent(identity)
    assert identity == PermanentID(key=order.id)


def test_it_persists_orders_in_storage(session_factory, storage):
    orders = [
        make_order(98, number="dignissimos", total="12.00"),
        make_order(9001, number="omnis", status="processing", customer_note="leave at door"),
    ]

    OrdersUpsertUseCase(storage).upsert(orders)

    with session_factory() as fresh:
        persisted_98 = load_order(fresh, DEFAULT_SITE_ID, 98)
        persisted_9001 = load_order(fresh, DEFAULT_SITE_ID, 9001)
        assert persisted_98 is not None and persisted_9001 is not None
        assert persisted_98.to_read_only() == orders[0]
        assert persisted_9001.to_read_only() == orders[1]


def test_existing_order_is_overwritten_in_place(session, storage):
    use_case = OrdersUpsertUseCase(storage)
    (before,) = use_case.upsert([make_order(10, site_id=1, total="5.00")])
    before_id = before.id

    (after,) = use_case.upsert([make_order(10, site_id=1, total="7.50")])

    assert after is before
    assert after.id == before_id
    assert after.total == "7.50"
    assert count_orders(session) == 1


def test_upsert_twice_creates_no_duplicates(session, storage):
    batch = [make_order(1), make_order(2), make_order(3)]
    use_case = OrdersUpsertUseCase(storage)

    use_case.upsert(batch)
    first_count = count_orders(session)
    use_case.upsert(batch)

    assert first_count == 3
    assert count_orders(session) == 3


def test_results_follow_input_positions(storage):
    use_case = OrdersUpsertUseCase(storage)
    use_case.upsert([make_order(20)])

    batch = [make_order(30), make_order(20), make_order(10, site_id=99)]
    stored = use_case.upsert(batch)

    assert [(o.site_id, o.order_id) for o in stored] == [r.key for r in batch]


def test_duplicate_key_in_batch_last_write_wins(session, storage):
    batch = [
        make_order(10, site_id=1, status="pending"),
        make_order(10, site_id=1, status="processing"),
    ]

    stored = OrdersUpsertUseCase(storage).upsert(batch)

    assert stored[0] is stored[1]
    assert load_order(session, 1, 10).status == "processing"
    assert count_orders(session) == 1


def test_storage_only_attributes_are_left_untouched(session, storage):
    use_case = OrdersUpsertUseCase(storage)
    (order,) = use_case.upsert([make_order(5)])
    order.exclusive_for_search = True
    session.commit()

    use_case.upsert([make_order(5, status="completed")])

    reloaded = load_order(session, DEFAULT_SITE_ID, 5)
    assert reloaded.exclusive_for_search is True
    assert reloaded.status == "completed"


def test_it_persists_order_relationships_in_storage(session_factory, storage):
    coupon = OrderCouponLine(coupon_id=1, code="SPRING", discount="1.00", discount_tax="0.10")
    refund = OrderRefundCondensed(refund_id=122, reason="", total="1.6")
    shipping_line = make_shipping_line(25)
    order = make_order(
        98,
        number="dignissimos",
        shipping_lines=(shipping_line,),
        coupons=(coupon,),
        refunds=(refund,),
        billing_address=make_address(),
        shipping_address=make_address(city="Paris", country="FR"),
    )

    OrdersUpsertUseCase(storage).upsert([order])

    with session_factory() as fresh:
        assert load_order(fresh, DEFAULT_SITE_ID, 98).to_read_only() == order
        assert load_order_coupon(fresh, DEFAULT_SITE_ID, 1).to_read_only() == coupon
        assert load_order_refund_condensed(fresh, DEFAULT_SITE_ID, 122).to_read_only() == refund
        assert load_shipping_line(fresh, DEFAULT_SITE_ID, 25).to_read_only() == shipping_line


def test_it_persists_order_item_taxes_in_storage(session, storage):
    taxes = (
        OrderItemTax(tax_id=2, subtotal="", total="0.2"),
        OrderItemTax(tax_id=3, subtotal="", total="0.6"),
    )
    order = make_order(98, items=(make_order_item(22, taxes=taxes),))

    OrdersUpsertUseCase(storage).upsert([order])

    assert load_order_item_tax(session, 22, 2).to_read_only() == taxes[0]
    assert load_order_item_tax(session, 22, 3).to_read_only() == taxes[1]


def test_it_persists_shipping_line_taxes_in_storage(session, storage):
    taxes = (
        ShippingLineTax(tax_id=2, subtotal="", total="0.2"),
        ShippingLineTax(tax_id=3, subtotal="", total="0.6"),
    )
    order = make_order(98, shipping_lines=(make_shipping_line(25, taxes=taxes),))

    OrdersUpsertUseCase(storage).upsert([order])

    assert load_shipping_line_tax(session, 25, 2).to_read_only() == taxes[0]
    assert load_shipping_line_tax(session, 25, 3).to_read_only() == taxes[1]


def test_children_are_matched_by_key_and_orphans_removed(session_factory, storage):
    use_case = OrdersUpsertUseCase(storage)
    use_case.upsert([make_order(7, items=(make_order_item(1), make_order_item(2)))])
    kept_row_id = load_order_item(storage.session, DEFAULT_SITE_ID, 2).id

    updated = make_order(7, items=(make_order_item(3), make_order_item(2, quantity=4)))
    use_case.upsert([updated])

    with session_factory() as fresh:
        assert load_order_item(fresh, DEFAULT_SITE_ID, 1) is None
        item_2 = load_order_item(fresh, DEFAULT_SITE_ID, 2)
        assert item_2.id == kept_row_id
        assert item_2.quantity == 4
        assert [i.item_id for i in load_order(fresh, DEFAULT_SITE_ID, 7).items] == [3, 2]


def test_commit_failure_propagates_and_aborts_batch(session, session_factory):
    storage = _FailingStorage(session, fail_on=2)
    batch = [make_order(1), make_order(2), make_order(3)]

    with pytest.raises(StorageError):
        OrdersUpsertUseCase(storage).upsert(batch)

    assert storage.commits == 2
    with session_factory() as fresh:
        # 逐条提交：失败之前的记录已落盘，之后的不再处理
        assert load_order(fresh, DEFAULT_SITE_ID, 1) is not None
        assert load_order(fresh, DEFAULT_SITE_ID, 2) is None
        assert load_order(fresh, DEFAULT_SITE_ID, 3) is None


def test_record_left_temporary_is_rejected(session):
    storage = _NeverPermanentStorage(session)

    with pytest.raises(TemporaryIdentityError):
        OrdersUpsertUseCase(storage).upsert([make_order(1)])


def test_duplicate_child_keys_collapse_to_one_row(session_factory, storage):
    order = make_order(
        7,
        items=(
            make_order_item(1, name="first"),
            make_order_item(2),
            make_order_item(1, name="again"),
        ),
    )

    OrdersUpsertUseCase(storage).upsert([order])

    with session_factory() as fresh:
        items = load_order(fresh, DEFAULT_SITE_ID, 7).items
        assert [i.item_id for i in items] == [2, 1]
        assert items[1].name == "again"
