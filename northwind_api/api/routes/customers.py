from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from northwind_api.api.security import AuthScopes, require_policy
from northwind_api.application.pagination import PagedResult
from northwind_api.application.schemas import CustomerCreate, CustomerRead, CustomerUpdate, CustomerWithOrdersRead
from northwind_api.application.services import CustomerService
from northwind_api.infrastructure.db import get_db

router = APIRouter(prefix="/customers", tags=["customers"])

can_read = Depends(require_policy(AuthScopes.READ_CUSTOMERS))
can_write = Depends(require_policy(AuthScopes.WRITE_CUSTOMERS))


@router.get("", response_model=PagedResult[CustomerRead], dependencies=[can_read])
def list_customers(
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
    db: Session = Depends(get_db),
):
    return CustomerService(db).list_paged(page_number, page_size)


@router.get("/{customer_id}", response_model=CustomerRead, dependencies=[can_read])
def get_customer(customer_id: int, db: Session = Depends(get_db)):
    customer = CustomerService(db).get_by_id(customer_id)
    if not customer:
        return Response(status_code=404)
    return customer


@router.get("/{customer_id}/orders", response_model=CustomerWithOrdersRead, dependencies=[can_read])
def get_customer_orders(customer_id: int, db: Session = Depends(get_db)):
    customer = CustomerService(db).get_with_orders(customer_id)
    if not customer:
        return Response(status_code=404)
    return customer


@router.post("", response_model=CustomerRead, status_code=201, dependencies=[can_write])
def create_customer(payload: CustomerCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    customer = CustomerService(db).create(payload)
    response.headers["Location"] = str(request.url_for("get_customer", customer_id=customer.id))
    return customer


@router.put("/{customer_id}", status_code=204, response_class=Response, dependencies=[can_write])
def update_customer(customer_id: int, payload: CustomerUpdate, db: Session = Depends(get_db)):
    if not CustomerService(db).update(customer_id, payload):
        return Response(status_code=404)
    return Response(status_code=204)


@router.delete("/{customer_id}", status_code=204, response_class=Response, dependencies=[can_write])
def delete_customer(customer_id: int, db: Session = Depends(get_db)):
    if not CustomerService(db).delete(customer_id):
        return Response(status_code=404)
    return Response(status_code=204)
