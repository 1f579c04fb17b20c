from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from northwind_api.api.security import ADMIN_ONLY, PRODUCTS_WRITE_OR_ADMIN, AuthScopes, require_policy
from northwind_api.application.catalog import DEFAULT_PAGE_SIZE, ProductQuery
from northwind_api.application.pagination import PagedResult
from northwind_api.application.schemas import ProductCreate, ProductRead, ProductUpdate
from northwind_api.application.services import ProductService
from northwind_api.infrastructure.db import get_db

router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=PagedResult[ProductRead], dependencies=[Depends(require_policy(AuthScopes.READ_PRODUCTS))])
def list_products(
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
    search: Optional[str] = Query(None),
    supplier_id: Optional[int] = Query(None, alias="supplierId"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    discontinued: Optional[bool] = Query(None),
    sort_by: str = Query("name", alias="sortBy"),
    sort_dir: str = Query("asc", alias="sortDir"),
    db: Session = Depends(get_db),
):
    """Product catalog with search, supplier/price/discontinued filters and sorting."""
    query = ProductQuery(
        page_number=page_number,
        page_size=page_size,
        search=search,
        supplier_id=supplier_id,
        min_price=min_price,
        max_price=max_price,
        discontinued=discontinued,
        sort_by=sort_by,
        sort_dir=sort_dir,
    )
    return ProductService(db).get_catalog(query)


@router.get("/{product_id}", response_model=ProductRead, dependencies=[Depends(require_policy(AuthScopes.READ_PRODUCTS))])
def get_product(product_id: int, db: Session = Depends(get_db)):
    product = ProductService(db).get_by_id(product_id)
    if not product:
        return Response(status_code=404)
    return product


@router.post("", response_model=ProductRead, status_code=201, dependencies=[Depends(require_policy(PRODUCTS_WRITE_OR_ADMIN))])
def create_product(payload: ProductCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    product = ProductService(db).create(payload)
    response.headers["Location"] = str(request.url_for("get_product", product_id=product.id))
    return product


@router.put(
    "/{product_id}",
    status_code=204,
    response_class=Response,
    dependencies=[Depends(require_policy(PRODUCTS_WRITE_OR_ADMIN))],
)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    if not ProductService(db).update(product_id, payload):
        return Response(status_code=404)
    return Response(status_code=204)


@router.delete("/{product_id}", status_code=204, response_class=Response, dependencies=[Depends(require_policy(ADMIN_ONLY))])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    if not ProductService(db).delete(product_id):
        return Response(status_code=404)
    return Response(status_code=204)
