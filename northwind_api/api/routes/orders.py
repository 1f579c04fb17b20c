from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from northwind_api.api.security import AuthScopes, require_policy
from northwind_api.application.pagination import PagedResult
from northwind_api.application.schemas import OrderCreate, OrderRead, OrderUpdate, OrderWithItemsRead
from northwind_api.application.services import OrderService
from northwind_api.infrastructure.db import get_db

router = APIRouter(prefix="/orders", tags=["orders"])

can_read = Depends(require_policy(AuthScopes.READ_ORDERS))
can_write = Depends(require_policy(AuthScopes.WRITE_ORDERS))


@router.get("", response_model=PagedResult[OrderRead], dependencies=[can_read])
def list_orders(
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
    db: Session = Depends(get_db),
):
    """Most recent orders first."""
    return OrderService(db).list_paged(page_number, page_size)


@router.get("/{order_id}", response_model=OrderRead, dependencies=[can_read])
def get_order(order_id: int, db: Session = Depends(get_db)):
    order = OrderService(db).get_by_id(order_id)
    if not order:
        return Response(status_code=404)
    return order


@router.get("/{order_id}/items", response_model=OrderWithItemsRead, dependencies=[can_read])
def get_order_items(order_id: int, db: Session = Depends(get_db)):
    order = OrderService(db).get_with_items(order_id)
    if not order:
        return Response(status_code=404)
    return order


@router.post("", response_model=OrderRead, status_code=201, dependencies=[can_write])
def create_order(payload: OrderCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    order = OrderService(db).create(payload)
    response.headers["Location"] = str(request.url_for("get_order", order_id=order.id))
    return order


@router.put("/{order_id}", status_code=204, response_class=Response, dependencies=[can_write])
def update_order(order_id: int, payload: OrderUpdate, db: Session = Depends(get_db)):
    if not OrderService(db).update(order_id, payload):
        return Response(status_code=404)
    return Response(status_code=204)


@router.delete("/{order_id}", status_code=204, response_class=Response, dependencies=[can_write])
def delete_order(order_id: int, db: Session = Depends(get_db)):
    """Deletes the order and its items."""
    if not OrderService(db).delete(order_id):
        return Response(status_code=404)
    return Response(status_code=204)
