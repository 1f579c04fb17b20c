from typing import Optional

from northwind_api.core.logging_config import get_logger
from northwind_api.domain.models import Order, OrderItem, Product
from ..exceptions import ReferenceNotFoundError
from ..mapping import to_order_item_read
from ..pagination import PagedResult
from ..schemas import OrderItemCreate, OrderItemRead, OrderItemUpdate
from ..validation import normalize_paging, require_non_negative, require_positive_id, require_quantity
from .base import BaseService

logger = get_logger(__name__)


class OrderItemService(BaseService):
    default_page_size = 20

    def _with_product_name(self):
        return self.db.query(OrderItem, Product.product_name).join(Product, OrderItem.product_id == Product.id)

    def _product_name(self, product_id: int) -> str:
        row = self.db.query(Product.product_name).filter(Product.id == product_id).first()
        if row is None:
            raise ReferenceNotFoundError("Product", product_id)
        return row.product_name

    def list_paged(
        self, page_number: int = 1, page_size: int = 20, order_id: Optional[int] = None
    ) -> PagedResult[OrderItemRead]:
        """Newest items first, optionally only those of one order."""
        page_number, page_size = normalize_paging(page_number, page_size, self.default_page_size)
        if order_id is not None:
            require_positive_id(order_id, "orderId")

        count_query = self.db.query(OrderItem)
        rows_query = self._with_product_name()
        if order_id is not None:
            count_query = count_query.filter(OrderItem.order_id == order_id)
            rows_query = rows_query.filter(OrderItem.order_id == order_id)

        total = count_query.count()
        rows = (
            rows_query.order_by(OrderItem.id.desc())
            .offset((page_number - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return PagedResult[OrderItemRead](
            items=[to_order_item_read(item, product_name) for item, product_name in rows],
            page_number=page_number,
            page_size=page_size,
            total_count=total,
        )

    def get_by_id(self, item_id: int) -> Optional[OrderItemRead]:
        row = self._with_product_name().filter(OrderItem.id == item_id).first()
        if row is None:
            return None
        item, product_name = row
        return to_order_item_read(item, product_name)

    def create(self, data: OrderItemCreate) -> OrderItemRead:
        unit_price = require_non_negative(data.unit_price, "unitPrice")
        quantity = require_quantity(data.quantity)
        if self.db.query(Order.id).filter(Order.id == data.order_id).first() is None:
            raise ReferenceNotFoundError("Order", data.order_id)
        product_name = self._product_name(data.product_id)

        item = OrderItem(
            order_id=data.order_id,
            product_id=data.product_id,
            unit_price=unit_price,
            quantity=quantity,
        )
        self.db.add(item)
        self._commit()
        logger.info(
            "Order item created",
            extra={'extra_fields': {'order_item_id': item.id, 'order_id': item.order_id, 'product_id': item.product_id}}
        )
        return to_order_item_read(item, product_name)

    def update(self, item_id: int, data: OrderItemUpdate) -> bool:
        item = self.db.get(OrderItem, item_id)
        if not item:
            return False
        unit_price = require_non_negative(data.unit_price, "unitPrice")
        quantity = require_quantity(data.quantity)
        self._product_name(data.product_id)

        item.product_id = data.product_id
        item.unit_price = unit_price
        item.quantity = quantity
        self._commit()
        logger.info("Order item updated", extra={'extra_fields': {'order_item_id': item_id}})
        return True

    def delete(self, item_id: int) -> bool:
        item = self.db.get(OrderItem, item_id)
        if not item:
            return False
        self.db.delete(item)
        self._commit()
        logger.info("Order item deleted", extra={'extra_fields': {'order_item_id': item_id}})
        return True
