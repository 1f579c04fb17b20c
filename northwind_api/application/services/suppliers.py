from typing import Optional

from sqlalchemy import func

from northwind_api.core.logging_config import get_logger
from northwind_api.domain.models import Product, Supplier
from ..exceptions import ResourceInUseError
from ..mapping import to_supplier_read
from ..pagination import PagedResult
from ..schemas import SupplierCreate, SupplierRead, SupplierUpdate
from ..validation import normalize_paging, require_text
from .base import BaseService, utc_now

logger = get_logger(__name__)


class SupplierService(BaseService):
    default_page_size = 10

    def list_paged(self, page_number: int = 1, page_size: int = 10) -> PagedResult[SupplierRead]:
        page_number, page_size = normalize_paging(page_number, page_size, self.default_page_size)
        total = self.db.query(func.count(Supplier.id)).scalar()
        rows = (
            self.db.query(Supplier)
            .order_by(Supplier.company_name, Supplier.id)
            .offset((page_number - 1) * page_size)
            .limit(page_size)
            .all()
        )
        return PagedResult[SupplierRead](
            items=[to_supplier_read(s) for s in rows],
            page_number=page_number,
            page_size=page_size,
            total_count=total,
        )

    def get_by_id(self, supplier_id: int) -> Optional[SupplierRead]:
        supplier = self.db.get(Supplier, supplier_id)
        return to_supplier_read(supplier) if supplier else None

    def create(self, data: SupplierCreate) -> SupplierRead:
        company_name = require_text(data.company_name, "companyName")

        supplier = Supplier(
            company_name=company_name,
            contact_name=data.contact_name,
            contact_title=data.contact_title,
            city=data.city,
            country=data.country,
            phone=data.phone,
            fax=data.fax,
            created_at_utc=utc_now(),
        )
        self.db.add(supplier)
        self._commit()
        logger.info("Supplier created", extra={'extra_fields': {'supplier_id': supplier.id}})
        return to_supplier_read(supplier)

    def update(self, supplier_id: int, data: SupplierUpdate) -> bool:
        supplier = self.db.get(Supplier, supplier_id)
        if not supplier:
            return False
        company_name = require_text(data.company_name, "companyName")

        supplier.company_name = company_name
        supplier.contact_name = data.contact_name
        supplier.contact_title = data.contact_title
        supplier.city = data.city
        supplier.country = data.country
        supplier.phone = data.phone
        supplier.fax = data.fax
        supplier.updated_at_utc = utc_now()
        self._commit()
        logger.info("Supplier updated", extra={'extra_fields': {'supplier_id': supplier_id}})
        return True

    def delete(self, supplier_id: int) -> bool:
        supplier = self.db.get(Supplier, supplier_id)
        if not supplier:
            return False
        if self.db.query(Product.id).filter(Product.supplier_id == supplier_id).first():
            raise ResourceInUseError("Supplier", supplier_id, "products")
        self.db.delete(supplier)
        self._commit()
        logger.info("Supplier deleted", extra={'extra_fields': {'supplier_id': supplier_id}})
        return True
