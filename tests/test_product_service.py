from decimal import Decimal

import pytest

from northwind_api.application.exceptions import InvalidArgumentError, ReferenceNotFoundError, ResourceInUseError
from northwind_api.application.schemas import ProductCreate, ProductUpdate
from northwind_api.application.services import ProductService
from northwind_api.domain.models import Product


def test_create_resolves_supplier_name(db, add_supplier):
    supplier = add_supplier("Exotic Liquids")
    created = ProductService(db).create(
        ProductCreate(product_name="Chang", supplier_id=supplier.id, unit_price=Decimal("19.00"), package="24 - 12 oz bottles")
    )
    assert created.id > 0
    assert created.supplier_name == "Exotic Liquids"
    assert created.unit_price == 19.0
    assert created.is_discontinued is False


def test_negative_price_is_rejected_without_writing(db, add_supplier):
    supplier = add_supplier()
    with pytest.raises(InvalidArgumentError) as exc:
        ProductService(db).create(ProductCreate(product_name="Chai", supplier_id=supplier.id, unit_price=Decimal("-1")))
    assert exc.value.field == "unitPrice"
    assert db.query(Product).count() == 0


def test_unknown_supplier_is_a_reference_error(db):
    with pytest.raises(ReferenceNotFoundError) as exc:
        ProductService(db).create(ProductCreate(product_name="Chai", supplier_id=4242, unit_price=Decimal("1")))
    assert exc.value.resource == "Supplier"
    assert db.query(Product).count() == 0


def test_get_by_id(db, add_product):
    product = add_product("Aniseed Syrup", "10.00")
    fetched = ProductService(db).get_by_id(product.id)
    assert fetched.product_name == "Aniseed Syrup"
    assert fetched.supplier_name == "Exotic Liquids"
    assert ProductService(db).get_by_id(999999) is None


def test_update(db, add_supplier, add_product):
    product = add_product()
    other = add_supplier("New Orleans Cajun Delights")
    service = ProductService(db)

    payload = ProductUpdate(product_name="Chai Tea", supplier_id=other.id, unit_price=Decimal("20.50"), is_discontinued=True)
    assert service.update(product.id, payload) is True
    fetched = service.get_by_id(product.id)
    assert fetched.product_name == "Chai Tea"
    assert fetched.supplier_name == "New Orleans Cajun Delights"
    assert fetched.unit_price == 20.5
    assert fetched.is_discontinued is True
    assert fetched.updated_at_utc is not None


def test_update_validates_like_create(db, add_product):
    product = add_product()
    service = ProductService(db)
    with pytest.raises(InvalidArgumentError):
        service.update(product.id, ProductUpdate(product_name="Chai", supplier_id=product.supplier_id, unit_price=Decimal("-5")))
    with pytest.raises(ReferenceNotFoundError):
        service.update(product.id, ProductUpdate(product_name="Chai", supplier_id=4242, unit_price=Decimal("5")))


def test_update_missing_returns_false(db, add_supplier):
    supplier = add_supplier()
    payload = ProductUpdate(product_name="X", supplier_id=supplier.id, unit_price=Decimal("1"))
    assert ProductService(db).update(999999, payload) is False


def test_delete_referenced_product_is_rejected(db, add_product, add_order, add_order_item):
    product = add_product()
    add_order_item(add_order(), product)
    with pytest.raises(ResourceInUseError):
        ProductService(db).delete(product.id)


def test_delete(db, add_product):
    product = add_product()
    assert ProductService(db).delete(product.id) is True
    assert ProductService(db).delete(product.id) is False


def test_list_paged_is_the_unfiltered_catalog_by_name(db, add_supplier, add_product):
    supplier = add_supplier()
    for name in ("Tofu", "Chai", "Ikura", "Konbu"):
        add_product(name, supplier=supplier)

    page = ProductService(db).list_paged(0, 0)
    assert page.page_number == 1
    assert page.page_size == 10
    assert [p.product_name for p in page.items] == ["Chai", "Ikura", "Konbu", "Tofu"]


def test_list_paged_caps_page_size_instead_of_failing(db, add_product):
    add_product()
    page = ProductService(db, max_page_size=100).list_paged(1, 500)
    assert page.page_size == 100
    assert page.total_count == 1
