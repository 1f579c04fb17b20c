from datetime import datetime, timezone
from decimal import Decimal

import pytest

from northwind_api.application.exceptions import InvalidArgumentError, ReferenceNotFoundError
from northwind_api.application.schemas import OrderCreate, OrderUpdate
from northwind_api.application.services import CustomerService, OrderService
from northwind_api.domain.models import Order, OrderItem


def test_create_resolves_customer_name(db, add_customer):
    customer = add_customer("Jane", "Smith")
    created = OrderService(db).create(OrderCreate(
        order_number="542379",
        order_date=datetime(2024, 5, 1, 12, 0),
        customer_id=customer.id,
        total_amount=Decimal("440.00"),
    ))
    assert created.id > 0
    assert created.customer_name == "Jane Smith"
    assert created.total_amount == 440.0


def test_aware_order_date_is_stored_as_utc(db, add_customer):
    customer = add_customer()
    created = OrderService(db).create(OrderCreate(
        order_number="1",
        order_date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
        customer_id=customer.id,
        total_amount=Decimal("1"),
    ))
    assert OrderService(db).get_by_id(created.id).order_date == datetime(2024, 5, 1, 12, 0)


def test_unknown_customer_is_a_reference_error(db):
    with pytest.raises(ReferenceNotFoundError):
        OrderService(db).create(OrderCreate(
            order_number="1", order_date=datetime(2024, 1, 1), customer_id=4242, total_amount=Decimal("1")
        ))
    assert db.query(Order).count() == 0


def test_negative_total_is_rejected(db, add_customer):
    customer = add_customer()
    with pytest.raises(InvalidArgumentError):
        OrderService(db).create(OrderCreate(
            order_number="1", order_date=datetime(2024, 1, 1), customer_id=customer.id, total_amount=Decimal("-0.01")
        ))


def test_list_newest_first_then_order_number(db, add_customer, add_order):
    customer = add_customer()
    add_order("B", datetime(2024, 1, 1), customer)
    add_order("C", datetime(2024, 2, 1), customer)
    add_order("A", datetime(2024, 1, 1), customer)

    page = OrderService(db).list_paged(1, 10)
    assert [o.order_number for o in page.items] == ["C", "A", "B"]
    assert page.items[0].customer_name == "Maria Anders"


def test_get_with_items_in_insertion_order(db, add_customer, add_order, add_product, add_order_item):
    order = add_order(customer=add_customer("Jane", "Smith"))
    tofu = add_product("Tofu", "23.25")
    chai = add_product("Chai", "18.00")
    add_order_item(order, tofu, "23.25", 2)
    add_order_item(order, chai, "18.00", 3)

    result = OrderService(db).get_with_items(order.id)
    assert result.customer_name == "Jane Smith"
    assert [(i.product_name, i.quantity) for i in result.items] == [("Tofu", 2), ("Chai", 3)]
    assert [i.line_total for i in result.items] == [46.5, 54.0]


def test_names_are_read_live(db, add_customer, add_order, add_product, add_order_item):
    customer = add_customer("Jane", "Smith")
    order = add_order(customer=customer)
    add_order_item(order, add_product("Tofu"))

    customer.last_name = "Doe"
    db.commit()

    assert OrderService(db).get_with_items(order.id).customer_name == "Jane Doe"


def test_update_keeps_customer(db, add_order):
    order = add_order()
    service = OrderService(db)
    assert service.update(order.id, OrderUpdate(
        order_number="542378-R", order_date=datetime(2024, 4, 1), total_amount=Decimal("50")
    )) is True

    fetched = service.get_by_id(order.id)
    assert fetched.order_number == "542378-R"
    assert fetched.customer_id == order.customer_id
    assert fetched.updated_at_utc is not None
    assert service.update(999999, OrderUpdate(
        order_number="x", order_date=datetime(2024, 4, 1), total_amount=Decimal("1")
    )) is False


def test_delete_removes_items(db, add_order, add_product, add_order_item):
    order = add_order()
    add_order_item(order, add_product())
    add_order_item(order, add_product("Tofu"))

    assert OrderService(db).delete(order.id) is True
    assert db.query(OrderItem).count() == 0
    assert OrderService(db).get_with_items(order.id) is None
    assert OrderService(db).delete(order.id) is False


def test_customer_can_be_deleted_once_orders_are_gone(db, add_customer, add_order):
    customer = add_customer()
    order = add_order(customer=customer)
    OrderService(db).delete(order.id)
    assert CustomerService(db).delete(customer.id) is True
