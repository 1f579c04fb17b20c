from pydantic import BaseModel, Field, computed_field
from pydantic.alias_generators import to_camel
from datetime import datetime
from decimal import Decimal
from typing import Optional

PHONE_PATTERN = r"^[0-9+()\-. ]*$"

class APIModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input too"""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True

# Customers

class CustomerCreate(APIModel):
    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    address1: Optional[str] = Field(None, max_length=200)
    address2: Optional[str] = Field(None, max_length=200)
    state: Optional[str] = Field(None, max_length=50)
    zip_code: Optional[str] = Field(None, max_length=20)
    phone: Optional[str] = Field(None, max_length=30, pattern=PHONE_PATTERN)

class CustomerUpdate(CustomerCreate):
    pass

class CustomerRead(APIModel):
    id: int
    first_name: str
    last_name: str
    city: Optional[str] = None
    country: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    phone: Optional[str] = None
    created_at_utc: datetime
    updated_at_utc: Optional[datetime] = None

# Suppliers

class SupplierCreate(APIModel):
    company_name: str = Field(max_length=200)
    contact_name: Optional[str] = Field(None, max_length=100)
    contact_title: Optional[str] = Field(None, max_length=100)
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30, pattern=PHONE_PATTERN)
    fax: Optional[str] = Field(None, max_length=50)

class SupplierUpdate(SupplierCreate):
    pass

class SupplierRead(APIModel):
    id: int
    company_name: str
    contact_name: Optional[str] = None
    contact_title: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    fax: Optional[str] = None
    created_at_utc: datetime
    updated_at_utc: Optional[datetime] = None

# Products

class ProductCreate(APIModel):
    product_name: str = Field(max_length=200)
    supplier_id: int
    unit_price: Decimal
    package: Optional[str] = Field(None, max_length=100)
    is_discontinued: bool = False

class ProductUpdate(ProductCreate):
    pass

class ProductRead(APIModel):
    id: int
    product_name: str
    supplier_id: int
    # Resolved from the supplier at read time, never stored on the product
    supplier_name: Optional[str] = None
    unit_price: float
    package: Optional[str] = None
    is_discontinued: bool
    created_at_utc: datetime
    updated_at_utc: Optional[datetime] = None

# Orders

class OrderCreate(APIModel):
    order_number: str = Field(max_length=50)
    order_date: datetime
    customer_id: int
    total_amount: Decimal

class OrderUpdate(APIModel):
    order_number: str = Field(max_length=50)
    order_date: datetime
    total_amount: Decimal

class OrderRead(APIModel):
    id: int
    order_number: str
    order_date: datetime
    customer_id: int
    customer_name: Optional[str] = None
    total_amount: float
    created_at_utc: datetime
    updated_at_utc: Optional[datetime] = None

# Order items

class OrderItemCreate(APIModel):
    order_id: int
    product_id: int
    unit_price: Decimal
    quantity: int

class OrderItemUpdate(APIModel):
    product_id: int
    unit_price: Decimal
    quantity: int

class OrderItemRead(APIModel):
    id: int
    order_id: int
    product_id: int
    product_name: Optional[str] = None
    unit_price: float
    quantity: int

    @computed_field(alias="lineTotal")
    @property
    def line_total(self) -> float:
        return round(self.unit_price * self.quantity, 2)

# Composites

class CustomerWithOrdersRead(CustomerRead):
    orders: list[OrderRead] = []

class OrderWithItemsRead(OrderRead):
    items: list[OrderItemRead] = []
