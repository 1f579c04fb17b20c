from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.orm import Session

from northwind_api.api.security import ADMIN_ONLY, require_policy
from northwind_api.application.pagination import PagedResult
from northwind_api.application.schemas import SupplierCreate, SupplierRead, SupplierUpdate
from northwind_api.application.services import SupplierService
from northwind_api.infrastructure.db import get_db

# Supplier management is an administrative task for every verb
router = APIRouter(prefix="/suppliers", tags=["suppliers"], dependencies=[Depends(require_policy(ADMIN_ONLY))])


@router.get("", response_model=PagedResult[SupplierRead])
def list_suppliers(
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize"),
    db: Session = Depends(get_db),
):
    return SupplierService(db).list_paged(page_number, page_size)


@router.get("/{supplier_id}", response_model=SupplierRead)
def get_supplier(supplier_id: int, db: Session = Depends(get_db)):
    supplier = SupplierService(db).get_by_id(supplier_id)
    if not supplier:
        return Response(status_code=404)
    return supplier


@router.post("", response_model=SupplierRead, status_code=201)
def create_supplier(payload: SupplierCreate, request: Request, response: Response, db: Session = Depends(get_db)):
    supplier = SupplierService(db).create(payload)
    response.headers["Location"] = str(request.url_for("get_supplier", supplier_id=supplier.id))
    return supplier


@router.put("/{supplier_id}", status_code=204, response_class=Response)
def update_supplier(supplier_id: int, payload: SupplierUpdate, db: Session = Depends(get_db)):
    if not SupplierService(db).update(supplier_id, payload):
        return Response(status_code=404)
    return Response(status_code=204)


@router.delete("/{supplier_id}", status_code=204, response_class=Response)
def delete_supplier(supplier_id: int, db: Session = Depends(get_db)):
    if not SupplierService(db).delete(supplier_id):
        return Response(status_code=404)
    return Response(status_code=204)
