"""Entity -> DTO projections.

Display names that live on related rows (supplier, customer, product) are passed
in by the caller, which fetches them with an explicit join or lookup.
"""

from typing import Optional

from northwind_api.domain.models import Customer, Order, OrderItem, Product, Supplier
from .schemas import CustomerRead, OrderItemRead, OrderRead, ProductRead, SupplierRead


def full_name(first_name: Optional[str], last_name: Optional[str]) -> Optional[str]:
    if first_name is None and last_name is None:
        return None
    return f"{first_name or ''} {last_name or ''}".strip()


def to_customer_read(customer: Customer) -> CustomerRead:
    return CustomerRead.model_validate(customer)


def to_supplier_read(supplier: Supplier) -> SupplierRead:
    return SupplierRead.model_validate(supplier)


def to_product_read(product: Product, supplier_name: Optional[str]) -> ProductRead:
    return ProductRead(
        id=product.id,
        product_name=product.product_name,
        supplier_id=product.supplier_id,
        supplier_name=supplier_name,
        unit_price=float(product.unit_price),
        package=product.package,
        is_discontinued=product.is_discontinued,
        created_at_utc=product.created_at_utc,
        updated_at_utc=product.updated_at_utc,
    )


def to_order_read(order: Order, customer_name: Optional[str]) -> OrderRead:
    return OrderRead(
        id=order.id,
        order_number=order.order_number,
        order_date=order.order_date,
        customer_id=order.customer_id,
        customer_name=customer_name,
        total_amount=float(order.total_amount),
        created_at_utc=order.created_at_utc,
        updated_at_utc=order.updated_at_utc,
    )


def to_order_item_read(item: OrderItem, product_name: Optional[str]) -> OrderItemRead:
    return OrderItemRead(
        id=item.id,
        order_id=item.order_id,
        product_id=item.product_id,
        product_name=product_name,
        unit_price=float(item.unit_price),
        quantity=item.quantity,
    )
