from decimal import Decimal

import pytest

from northwind_api.application.exceptions import InvalidArgumentError, ReferenceNotFoundError
from northwind_api.application.schemas import OrderItemCreate, OrderItemUpdate
from northwind_api.application.services import OrderItemService
from northwind_api.domain.models import OrderItem


def test_create_resolves_product_name_and_line_total(db, add_order, add_product):
    order = add_order()
    product = add_product("Queso Cabrales", "21.00")

    created = OrderItemService(db).create(OrderItemCreate(
        order_id=order.id, product_id=product.id, unit_price=Decimal("21.00"), quantity=4
    ))
    assert created.id > 0
    assert created.product_name == "Queso Cabrales"
    assert created.line_total == 84.0
    assert created.model_dump(by_alias=True)["lineTotal"] == 84.0


def test_unknown_product_fails_without_writing(db, add_order):
    order = add_order()
    with pytest.raises(ReferenceNotFoundError) as exc:
        OrderItemService(db).create(OrderItemCreate(
            order_id=order.id, product_id=4242, unit_price=Decimal("1"), quantity=1
        ))
    assert exc.value.resource == "Product"
    assert db.query(OrderItem).count() == 0


def test_unknown_order_fails(db, add_product):
    product = add_product()
    with pytest.raises(ReferenceNotFoundError) as exc:
        OrderItemService(db).create(OrderItemCreate(
            order_id=4242, product_id=product.id, unit_price=Decimal("1"), quantity=1
        ))
    assert exc.value.resource == "Order"


@pytest.mark.parametrize("unit_price,quantity,field", [
    ("-1", 1, "unitPrice"),
    ("1", 0, "quantity"),
    ("1", -2, "quantity"),
])
def test_numeric_guards(db, add_order, add_product, unit_price, quantity, field):
    order = add_order()
    product = add_product()
    with pytest.raises(InvalidArgumentError) as exc:
        OrderItemService(db).create(OrderItemCreate(
            order_id=order.id, product_id=product.id, unit_price=Decimal(unit_price), quantity=quantity
        ))
    assert exc.value.field == field
    assert db.query(OrderItem).count() == 0


def test_list_newest_first_with_order_filter(db, add_order, add_product, add_order_item):
    first = add_order("1")
    second = add_order("2")
    product = add_product()
    a = add_order_item(first, product)
    b = add_order_item(second, product)
    c = add_order_item(first, product)

    service = OrderItemService(db)
    page = service.list_paged(0, 0)
    assert page.page_size == 20
    assert [i.id for i in page.items] == [c.id, b.id, a.id]

    page = service.list_paged(1, 20, order_id=first.id)
    assert page.total_count == 2
    assert [i.id for i in page.items] == [c.id, a.id]

    with pytest.raises(InvalidArgumentError):
        service.list_paged(1, 20, order_id=0)


def test_update_and_delete(db, add_order, add_product, add_order_item):
    order = add_order()
    item = add_order_item(order, add_product())
    tofu = add_product("Tofu")
    service = OrderItemService(db)

    assert service.update(item.id, OrderItemUpdate(product_id=tofu.id, unit_price=Decimal("23.25"), quantity=2)) is True
    fetched = service.get_by_id(item.id)
    assert fetched.product_name == "Tofu"
    assert fetched.order_id == order.id
    assert fetched.line_total == 46.5

    with pytest.raises(ReferenceNotFoundError):
        service.update(item.id, OrderItemUpdate(product_id=4242, unit_price=Decimal("1"), quantity=1))

    assert service.update(999999, OrderItemUpdate(product_id=tofu.id, unit_price=Decimal("1"), quantity=1)) is False
    assert service.delete(item.id) is True
    assert service.get_by_id(item.id) is None
    assert service.delete(item.id) is False
