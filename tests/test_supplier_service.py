import pytest

from northwind_api.application.exceptions import InvalidArgumentError, ResourceInUseError
from northwind_api.application.schemas import SupplierCreate, SupplierUpdate
from northwind_api.application.services import SupplierService
from northwind_api.domain.models import Supplier


def test_create_and_get(db):
    service = SupplierService(db)
    created = service.create(SupplierCreate(company_name="  Tokyo Traders ", contact_name="Yoshi Nagase", country="Japan"))
    assert created.id > 0
    assert created.company_name == "Tokyo Traders"

    fetched = service.get_by_id(created.id)
    assert fetched.contact_name == "Yoshi Nagase"
    assert fetched.updated_at_utc is None


def test_create_requires_company_name(db):
    with pytest.raises(InvalidArgumentError):
        SupplierService(db).create(SupplierCreate(company_name=""))
    assert db.query(Supplier).count() == 0


def test_list_orders_by_company_name(db, add_supplier):
    add_supplier("Pavlova, Ltd.")
    add_supplier("Exotic Liquids")
    add_supplier("Grandma Kelly's Homestead")

    page = SupplierService(db).list_paged(1, 2)
    assert [s.company_name for s in page.items] == ["Exotic Liquids", "Grandma Kelly's Homestead"]
    assert page.total_count == 3
    assert page.has_next is True


def test_update(db, add_supplier):
    supplier = add_supplier()
    service = SupplierService(db)
    assert service.update(supplier.id, SupplierUpdate(company_name="Exotic Liquids Ltd", fax="(171) 555-2223")) is True
    fetched = service.get_by_id(supplier.id)
    assert fetched.company_name == "Exotic Liquids Ltd"
    assert fetched.fax == "(171) 555-2223"
    assert fetched.updated_at_utc is not None
    assert service.update(999999, SupplierUpdate(company_name="X")) is False


def test_delete_with_products_is_rejected(db, add_supplier, add_product):
    supplier = add_supplier()
    add_product(supplier=supplier)

    with pytest.raises(ResourceInUseError):
        SupplierService(db).delete(supplier.id)


def test_delete(db, add_supplier):
    supplier = add_supplier()
    assert SupplierService(db).delete(supplier.id) is True
    assert SupplierService(db).delete(supplier.id) is False
