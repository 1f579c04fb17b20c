from typing import Optional

from sqlalchemy import func

from northwind_api.core.logging_config import get_logger
from northwind_api.domain.models import Customer, Order
from ..exceptions import ResourceInUseError
from ..mapping import full_name, to_customer_read, to_order_read
from ..pagination import PagedResult
from ..schemas import CustomerCreate, CustomerRead, CustomerUpdate, CustomerWithOrdersRead
from ..validation import normalize_paging, require_text
from .base import BaseService, utc_now

logger = get_logger(__name__)


class CustomerService(BaseService):
    default_page_size = 10

    def list_paged(self, page_number: int = 1, page_size: int = 10) -> PagedResult[CustomerRead]:
        page_number, page_size = normalize_paging(page_number, page_size, self.default_page_size)
        total = self.db.query(func.count(Customer.id)).scalar()
        rows = (
            self.db.query(Customer)
            .order_by(Customer.last_name, Customer.first_name, Customer.id)
            .offset((page_number - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return PagedResult[CustomerRead](
            items=[to_customer_read(c) for c in rows],
            page_number=page_number,
            page_size=page_size,
            total_count=total,
        )

    def get_by_id(self, customer_id: int) -> Optional[CustomerRead]:
        customer = self.db.get(Customer, customer_id)
        return to_customer_read(customer) if customer else None

    def get_with_orders(self, customer_id: int) -> Optional[CustomerWithOrdersRead]:
        customer = self.db.get(Customer, customer_id)
        if not customer:
            return None
        orders = (
            self.db.query(Order)
            .filter(Order.customer_id == customer_id)
            .order_by(Order.order_date.desc(), Order.id.desc())
            .all()
        )
        name = full_name(customer.first_name, customer.last_name)
        return CustomerWithOrdersRead(
            **to_customer_read(customer).model_dump(),
            orders=[to_order_read(o, name) for o in orders],
        )

    def create(self, data: CustomerCreate) -> CustomerRead:
        first_name = require_text(data.first_name, "firstName")
        last_name = require_text(data.last_name, "lastName")

        customer = Customer(
            first_name=first_name,
            last_name=last_name,
            city=data.city,
            country=data.country,
            address1=data.address1,
            address2=data.address2,
            state=data.state,
            zip_code=data.zip_code,
            phone=data.phone,
            created_at_utc=utc_now(),
        )
        self.db.add(customer)
        self._commit()
        logger.info("Customer created", extra={'extra_fields': {'customer_id': customer.id}})
        return to_customer_read(customer)

    def update(self, customer_id: int, data: CustomerUpdate) -> bool:
        customer = self.db.get(Customer, customer_id)
        if not customer:
            return False
        first_name = require_text(data.first_name, "firstName")
        last_name = require_text(data.last_name, "lastName")

        customer.first_name = first_name
        customer.last_name = last_name
        customer.city = data.city
        customer.country = data.country
        customer.address1 = data.address1
        customer.address2 = data.address2
        customer.state = data.state
        customer.zip_code = data.zip_code
        customer.phone = data.phone
        customer.updated_at_utc = utc_now()
        self._commit()
        logger.info("Customer updated", extra={'extra_fields': {'customer_id': customer_id}})
        return True

    def delete(self, customer_id: int) -> bool:
        customer = self.db.get(Customer, customer_id)
        if not customer:
            return False
        if self.db.query(Order.id).filter(Order.customer_id == customer_id).first():
            raise ResourceInUseError("Customer", customer_id, "orders")
        self.db.delete(customer)
        self._commit()
        logger.info("Customer deleted", extra={'extra_fields': {'customer_id': customer_id}})
        return True
