from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from northwind_api.api.security import AuthScopes, require_policy
from northwind_api.application.pagination import PagedResult
from northwind_api.application.schemas import OrderItemCreate, OrderItemRead, OrderItemUpdate
from northwind_api.application.services import OrderItemService
from northwind_api.infrastructure.db import get_db

router = APIRouter(prefix="/orderitems", tags=["order items"])

can_read = Depends(require_policy(AuthScopes.READ_ORDER_ITEMS))
can_write = Depends(require_policy(AuthScopes.WRITE_ORDER_ITEMS))


@router.get("", response_model=PagedResult[OrderItemRead], dependencies=[can_read])
def list_order_items(
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(20, alias="pageSize"),
    order_id: Optional[int] = Query(None, alias="orderId"),
    db: Session = Depends(get_db),
):
    return OrderItemService(db).list_paged(page_number, page_size, order_id)


@router.get("/{item_id}", response_model=OrderItemRead, dependencies=[can_read])
def get_order_item(item_id: int, db: Session = Depends(get_db)):
    item = OrderItemService(db).get_by_id(item_id)
    if not item:
        return Response(status_code=404)
    return item


@router.post("", response_model=OrderItemRead, status_code=201, dependencies=[can_write])
def create_order_item(payload: OrderItemCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    item = OrderItemService(db).create(payload)
    response.headers["Location"] = str(request.url_for("get_order_item", item_id=item.id))
    return item


@router.put("/{item_id}", status_code=204, response_class=Response, dependencies=[can_write])
def update_order_item(item_id: int, payload: OrderItemUpdate, db: Session = Depends(get_db)):
    if not OrderItemService(db).update(item_id, payload):
        return Response(status_code=404)
    return Response(status_code=204)


@router.delete("/{item_id}", status_code=204, response_class=Response, dependencies=[can_write])
def delete_order_item(item_id: int, db: Session = Depends(get_db)):
    if not OrderItemService(db).delete(item_id):
        return Response(status_code=404)
    return Response(status_code=204)
