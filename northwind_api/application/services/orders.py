from typing import Optional

from sqlalchemy import func

from northwind_api.core.logging_config import get_logger
from northwind_api.domain.models import Customer, Order, OrderItem, Product
from ..exceptions import ReferenceNotFoundError
from ..mapping import full_name, to_order_item_read, to_order_read
from ..pagination import PagedResult
from ..schemas import OrderCreate, OrderRead, OrderUpdate, OrderWithItemsRead
from ..validation import normalize_paging, require_non_negative, require_text
from .base import BaseService, as_utc, utc_now

logger = get_logger(__name__)


class OrderService(BaseService):
    default_page_size = 10

    def _with_customer_name(self):
        return self.db.query(Order, Customer.first_name, Customer.last_name).join(
            Customer, Order.customer_id == Customer.id
        )

    def list_paged(self, page_number: int = 1, page_size: int = 10) -> PagedResult[OrderRead]:
        page_number, page_size = normalize_paging(page_number, page_size, self.default_page_size)
        total = self.db.query(func.count(Order.id)).scalar()
        rows = (
            self._with_customer_name()
            .order_by(Order.order_date.desc(), Order.order_number, Order.id)
            .offset((page_number - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return PagedResult[OrderRead](
            items=[to_order_read(order, full_name(first, last)) for order, first, last in rows],
            page_number=page_number,
            page_size=page_size,
            total_count=total,
        )

    def get_by_id(self, order_id: int) -> Optional[OrderRead]:
        row = self._with_customer_name().filter(Order.id == order_id).first()
        if row is None:
            return None
        order, first, last = row
        return to_order_read(order, full_name(first, last))

    def get_with_items(self, order_id: int) -> Optional[OrderWithItemsRead]:
        """Order with its customer name and every line (insertion order) with its product name."""
        row = self._with_customer_name().filter(Order.id == order_id).first()
        if row is None:
            return None
        order, first, last = row
        items = (
            self.db.query(OrderItem, Product.product_name)
            .join(Product, OrderItem.product_id == Product.id)
            .filter(OrderItem.order_id == order_id)
            .order_by(OrderItem.id)
            .all()
        )
        return OrderWithItemsRead(
            **to_order_read(order, full_name(first, last)).model_dump(),
            items=[to_order_item_read(item, product_name) for item, product_name in items],
        )

    def create(self, data: OrderCreate) -> OrderRead:
        order_number = require_text(data.order_number, "orderNumber")
        total_amount = require_non_negative(data.total_amount, "totalAmount")
        customer = (
            self.db.query(Customer.first_name, Customer.last_name)
            .filter(Customer.id == data.customer_id)
            .first()
        )
        if customer is None:
            raise ReferenceNotFoundError("Customer", data.customer_id)

        order = Order(
            order_number=order_number,
            order_date=as_utc(data.order_date),
            customer_id=data.customer_id,
            total_amount=total_amount,
            created_at_utc=utc_now(),
        )
        self.db.add(order)
        self._commit()
        logger.info(
            "Order created",
            extra={'extra_fields': {'order_id': order.id, 'customer_id': order.customer_id}}
        )
        return to_order_read(order, full_name(customer.first_name, customer.last_name))

    def update(self, order_id: int, data: OrderUpdate) -> bool:
        order = self.db.get(Order, order_id)
        if not order:
            return False
        order_number = require_text(data.order_number, "orderNumber")
        total_amount = require_non_negative(data.total_amount, "totalAmount")

        order.order_number = order_number
        order.order_date = as_utc(data.order_date)
        order.total_amount = total_amount
        order.updated_at_utc = utc_now()
        self._commit()
        logger.info("Order updated", extra={'extra_fields': {'order_id': order_id}})
        return True

    def delete(self, order_id: int) -> bool:
        """Removes the order together with its items."""
        order = self.db.get(Order, order_id)
        if not order:
            return False
        self.db.delete(order)
        self._commit()
        logger.info("Order deleted", extra={'extra_fields': {'order_id': order_id}})
        return True
