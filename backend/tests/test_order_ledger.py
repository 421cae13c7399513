from datetime import date

import pytest

from services import order_ledger, stock_ledger
from utils.errors import OrderNotFound, ValidationError


def _fields(**overrides):
    fields = {
        "order_date": date(2024, 1, 7),
        "product_code": "P-7",
        "product_name": "Cable tie 200mm",
        "quantity_ordered": 40,
        "supplier_id": 1,
        "personnel_id": 1,
    }
    fields.update(overrides)
    return fields


def test_create_and_read_order(db_session):
    order = order_ledger.create_order(db_session, _fields())

    loaded = order_ledger.get_order(db_session, order.id)
    assert loaded.product_code == "P-7"
    assert loaded.quantity_ordered == 40
    assert loaded.order_date == date(2024, 1, 7)


@pytest.mark.parametrize("missing", ["order_date", "product_code", "product_name",
                                     "quantity_ordered", "supplier_id", "personnel_id"])
def test_create_requires_every_field(db_session, missing):
    fields = _fields()
    del fields[missing]

    with pytest.raises(ValidationError) as exc:
        order_ledger.create_order(db_session, fields)
    assert missing in exc.value.message


@pytest.mark.parametrize("quantity", [0, -3])
def test_create_requires_positive_quantity(db_session, quantity):
    with pytest.raises(ValidationError):
        order_ledger.create_order(db_session, _fields(quantity_ordered=quantity))


def test_create_rejects_blank_product_code(db_session):
    with pytest.raises(ValidationError):
        order_ledger.create_order(db_session, _fields(product_code="  "))


def test_missing_order_is_not_found(db_session):
    with pytest.raises(OrderNotFound):
        order_ledger.get_order(db_session, 1)
    with pytest.raises(OrderNotFound):
        order_ledger.update_order(db_session, 1, {"product_name": "x"})
    with pytest.raises(OrderNotFound):
        order_ledger.delete_order(db_session, 1)


def test_partial_update_keeps_other_fields(db_session):
    order = order_ledger.create_order(db_session, _fields())

    updated = order_ledger.update_order(db_session, order.id, {"quantity_ordered": 55})

    assert updated.quantity_ordered == 55
    assert updated.product_name == "Cable tie 200mm"


def test_update_cannot_clear_required_field(db_session):
    order = order_ledger.create_order(db_session, _fields())

    with pytest.raises(ValidationError):
        order_ledger.update_order(db_session, order.id, {"product_code": None})


def test_update_does_not_touch_stock_records(db_session):
    order = order_ledger.create_order(db_session, _fields())
    record = stock_ledger.create_entry(db_session, entry_date=date(2024, 1, 9), quantity=40, order_id=order.id)

    order_ledger.update_order(db_session, order.id, {"quantity_ordered": 10})

    assert stock_ledger.get_stock(db_session, record.id).quantity == 40


def test_delete_keeps_stock_records(db_session):
    order = order_ledger.create_order(db_session, _fields())
    record = stock_ledger.create_entry(db_session, entry_date=date(2024, 1, 9), quantity=3, order_id=order.id)

    order_ledger.delete_order(db_session, order.id)

    orphan = stock_ledger.get_stock(db_session, record.id)
    assert orphan.order_id == order.id
    assert orphan.order is None


def test_list_filters_by_personnel_and_supplier(db_session):
    order_ledger.create_order(db_session, _fields(personnel_id=1, supplier_id=1))
    order_ledger.create_order(db_session, _fields(personnel_id=2, supplier_id=1))
    order_ledger.create_order(db_session, _fields(personnel_id=2, supplier_id=3))

    assert len(order_ledger.list_orders(db_session)) == 3
    assert len(order_ledger.list_orders(db_session, personnel_id=2)) == 2
    assert len(order_ledger.list_orders(db_session, supplier_id=1)) == 2
    assert len(order_ledger.list_orders(db_session, personnel_id=2, supplier_id=3)) == 1
