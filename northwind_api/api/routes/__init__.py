from fastapi import APIRouter

from .auth import router as auth_router
from .customers import router as customers_router
from .order_items import router as order_items_router
from .orders import router as orders_router
from .products import router as products_router
from .suppliers import router as suppliers_router

api_router = APIRouter()
api_router.include_router(customers_router)
api_router.include_router(suppliers_router)
api_router.include_router(products_router)
api_router.include_router(orders_router)
api_router.include_router(order_items_router)

__all__ = ["api_router", "auth_router"]
