from typing import Optional

from sqlalchemy.orm import Session

from northwind_api.core.logging_config import get_logger
from northwind_api.core_settings import get_settings
from northwind_api.domain.models import OrderItem, Product, Supplier
from ..catalog import ProductQuery, apply_filters, apply_ordering, apply_paging, validate_product_query
from ..exceptions import ReferenceNotFoundError, ResourceInUseError
from ..mapping import to_product_read
from ..pagination import PagedResult
from ..schemas import ProductCreate, ProductRead, ProductUpdate
from ..validation import normalize_paging, require_non_negative, require_text
from .base import BaseService, utc_now

logger = get_logger(__name__)


class ProductService(BaseService):
    default_page_size = 10

    def __init__(self, db: Session, max_page_size: Optional[int] = None):
        super().__init__(db)
        self.max_page_size = max_page_size or get_settings().CATALOG_MAX_PAGE_SIZE

    def _with_supplier_name(self):
        return self.db.query(Product, Supplier.company_name).join(Supplier, Product.supplier_id == Supplier.id)

    def _supplier_name(self, supplier_id: int) -> str:
        row = self.db.query(Supplier.company_name).filter(Supplier.id == supplier_id).first()
        if row is None:
            raise ReferenceNotFoundError("Supplier", supplier_id)
        return row.company_name

    def list_paged(self, page_number: int = 1, page_size: int = 10) -> PagedResult[ProductRead]:
        """Unfiltered catalog in default order (name ascending)."""
        page_number, page_size = normalize_paging(page_number, page_size, self.default_page_size)
        page_size = min(page_size, self.max_page_size)
        return self.get_catalog(ProductQuery(page_number=page_number, page_size=page_size))

    def get_catalog(self, query: ProductQuery) -> PagedResult[ProductRead]:
        """
        Filtered, sorted page of products.

        Raises InvalidArgumentError for a bad filter before anything is queried.
        The total count covers the whole filtered set, not just the returned page.
        """
        query = validate_product_query(query, self.max_page_size)

        total = apply_filters(self.db.query(Product), query).count()
        rows = apply_paging(apply_ordering(apply_filters(self._with_supplier_name(), query), query), query).all()
        return PagedResult[ProductRead](
            items=[to_product_read(product, supplier_name) for product, supplier_name in rows],
            page_number=query.page_number,
            page_size=query.page_size,
            total_count=total,
        )

    def get_by_id(self, product_id: int) -> Optional[ProductRead]:
        row = self._with_supplier_name().filter(Product.id == product_id).first()
        if row is None:
            return None
        product, supplier_name = row
        return to_product_read(product, supplier_name)

    def create(self, data: ProductCreate) -> ProductRead:
        product_name = require_text(data.product_name, "productName")
        unit_price = require_non_negative(data.unit_price, "unitPrice")
        supplier_name = self._supplier_name(data.supplier_id)

        product = Product(
            product_name=product_name,
            supplier_id=data.supplier_id,
            unit_price=unit_price,
            package=data.package,
            is_discontinued=data.is_discontinued,
            created_at_utc=utc_now(),
        )
        self.db.add(product)
        self._commit()
        logger.info(
            "Product created",
            extra={'extra_fields': {'product_id': product.id, 'supplier_id': product.supplier_id}}
        )
        return to_product_read(product, supplier_name)

    def update(self, product_id: int, data: ProductUpdate) -> bool:
        product = self.db.get(Product, product_id)
        if not product:
            return False
        product_name = require_text(data.product_name, "productName")
        unit_price = require_non_negative(data.unit_price, "unitPrice")
        self._supplier_name(data.supplier_id)

        product.product_name = product_name
        product.supplier_id = data.supplier_id
        product.unit_price = unit_price
        product.package = data.package
        product.is_discontinued = data.is_discontinued
        product.updated_at_utc = utc_now()
        self._commit()
        logger.info("Product updated", extra={'extra_fields': {'product_id': product_id}})
        return True

    def delete(self, product_id: int) -> bool:
        product = self.db.get(Product, product_id)
        if not product:
            return False
        if self.db.query(OrderItem.id).filter(OrderItem.product_id == product_id).first():
            raise ResourceInUseError("Product", product_id, "order items")
        self.db.delete(product)
        self._commit()
        logger.info("Product deleted", extra={'extra_fields': {'product_id': product_id}})
        return True
