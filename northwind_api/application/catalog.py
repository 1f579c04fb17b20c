"""Product catalog query: filters, ordering and paging over the products table."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import String, func
from sqlalchemy.orm import Query

from northwind_api.domain.models import Product
from .exceptions import InvalidArgumentError

DEFAULT_PAGE_SIZE = 20
SORT_DIRECTIONS = ("asc", "desc")
SORT_COLUMNS = {
    "name": Product.product_name,
    "price": Product.unit_price,
    "createdat": Product.created_at_utc,
}


class ProductQuery(BaseModel):
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    search: Optional[str] = None
    supplier_id: Optional[int] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    discontinued: Optional[bool] = None
    sort_by: str = "name"
    sort_dir: str = "asc"

    class Config:
        alias_generator = to_camel
        populate_by_name = True


def validate_product_query(query: ProductQuery, max_page_size: int = 100) -> ProductQuery:
    """Reject bad filters and return a copy with paging clamped and search trimmed."""
    if query.page_size > max_page_size:
        raise InvalidArgumentError("pageSize", f"pageSize cannot exceed {max_page_size}.")
    if query.min_price is not None and query.min_price < 0:
        raise InvalidArgumentError("minPrice", "minPrice cannot be negative.")
    if query.max_price is not None and query.max_price < 0:
        raise InvalidArgumentError("maxPrice", "maxPrice cannot be negative.")
    if query.min_price is not None and query.max_price is not None and query.min_price > query.max_price:
        raise InvalidArgumentError("minPrice", "minPrice cannot be greater than maxPrice.")
    if query.supplier_id is not None and query.supplier_id <= 0:
        raise InvalidArgumentError("supplierId", "supplierId must be a positive identifier.")

    sort_dir = (query.sort_dir or "").strip().lower()
    if sort_dir not in SORT_DIRECTIONS:
        raise InvalidArgumentError("sortDir", "sortDir must be 'asc' or 'desc'.")
    sort_by = (query.sort_by or "").strip().lower()
    if sort_by not in SORT_COLUMNS:
        raise InvalidArgumentError("sortBy", "sortBy must be one of 'name', 'price', 'createdAt'.")

    search = query.search.strip() if query.search else None
    return query.model_copy(update={
        "page_number": query.page_number if query.page_number > 0 else 1,
        "page_size": query.page_size if query.page_size > 0 else DEFAULT_PAGE_SIZE,
        "search": search or None,
        "sort_by": sort_by,
        "sort_dir": sort_dir,
    })


def apply_filters(q: Query, query: ProductQuery) -> Query:
    if query.search:
        # Case-insensitive on every backend; % and _ in the search text match literally
        name = func.lower(Product.product_name, type_=String)
        q = q.filter(name.contains(query.search.lower(), autoescape=True))
    if query.supplier_id is not None:
        q = q.filter(Product.supplier_id == query.supplier_id)
    if query.min_price is not None:
        q = q.filter(Product.unit_price >= query.min_price)
    if query.max_price is not None:
        q = q.filter(Product.unit_price <= query.max_price)
    if query.discontinued is not None:
        q = q.filter(Product.is_discontinued == query.discontinued)
    return q


def apply_ordering(q: Query, query: ProductQuery) -> Query:
    column = SORT_COLUMNS[query.sort_by]
    primary = column.desc() if query.sort_dir == "desc" else column.asc()
    return q.order_by(primary, Product.product_name.asc(), Product.id.asc())


def apply_paging(q: Query, query: ProductQuery) -> Query:
    return q.offset((query.page_number - 1) * query.page_size).limit(query.page_size)
