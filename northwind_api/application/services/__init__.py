from .customers import CustomerService
from .suppliers import SupplierService
from .products import ProductService
from .orders import OrderService
from .order_items import OrderItemService

__all__ = [
    "CustomerService",
    "SupplierService",
    "ProductService",
    "OrderService",
    "OrderItemService",
]
