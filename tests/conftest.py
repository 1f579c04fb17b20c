import os

# Settings are read once and cached, so the environment has to be in place before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "testing"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RUN_MIGRATIONS"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from northwind_api.api.security import ADMIN_ROLE, AuthScopes
from northwind_api.auth_local import create_access_token
from northwind_api.domain.models import Base, Customer, Order, OrderItem, Product, Supplier
from northwind_api.infrastructure.db import SessionLocal, engine
from northwind_api.main import app


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def token_factory():
    def make(*scopes, roles=(), subject="tester"):
        return {"Authorization": f"Bearer {create_access_token(subject, scopes, roles)}"}
    return make


@pytest.fixture
def anonymous_client():
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def client(token_factory):
    """Client holding every scope and the Admin role."""
    c = TestClient(app, raise_server_exceptions=False)
    c.headers.update(token_factory(*AuthScopes.ALL, roles=(ADMIN_ROLE,)))
    return c


# Row builders for service-level tests. Rows are written straight through the ORM.

@pytest.fixture
def add_supplier(db):
    def make(company_name="Exotic Liquids", **fields):
        supplier = Supplier(company_name=company_name, created_at_utc=datetime(2024, 1, 1), **fields)
        db.add(supplier)
        db.commit()
        return supplier
    return make


@pytest.fixture
def add_customer(db):
    def make(first_name="Maria", last_name="Anders", **fields):
        customer = Customer(first_name=first_name, last_name=last_name, created_at_utc=datetime(2024, 1, 1), **fields)
        db.add(customer)
        db.commit()
        return customer
    return make


@pytest.fixture
def add_product(db, add_supplier):
    def make(product_name="Chai", unit_price="18.00", supplier=None, created_at_utc=None, **fields):
        supplier = supplier or add_supplier()
        product = Product(
            product_name=product_name,
            supplier_id=supplier.id,
            unit_price=Decimal(unit_price),
            created_at_utc=created_at_utc or datetime(2024, 1, 1),
            **fields,
        )
        db.add(product)
        db.commit()
        return product
    return make


@pytest.fixture
def add_order(db, add_customer):
    def make(order_number="542378", order_date=None, customer=None, total_amount="100.00"):
        customer = customer or add_customer()
        order = Order(
            order_number=order_number,
            order_date=order_date or datetime(2024, 3, 1),
            customer_id=customer.id,
            total_amount=Decimal(total_amount),
            created_at_utc=datetime(2024, 3, 1),
        )
        db.add(order)
        db.commit()
        return order
    return make


@pytest.fixture
def add_order_item(db):
    def make(order, product, unit_price="10.00", quantity=1):
        item = OrderItem(order_id=order.id, product_id=product.id, unit_price=Decimal(unit_price), quantity=quantity)
        db.add(item)
        db.commit()
        return item
    return make
