from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import date


# Short supplier details embedded in order responses
class OrderSupplierOut(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# Short personnel details embedded in order responses
class OrderPersonnelOut(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


# Input schema for issuing a purchase order
class OrderCreate(BaseModel):
    order_date: date
    product_code: str = Field(min_length=1)
    product_name: str = Field(min_length=1)
    quantity_ordered: int = Field(gt=0)
    supplier_id: int
    personnel_id: int


# Partial update; omitted fields stay untouched
class OrderUpdate(BaseModel):
    order_date: Optional[date] = None
    product_code: Optional[str] = None
    product_name: Optional[str] = None
    quantity_ordered: Optional[int] = None
    supplier_id: Optional[int] = None
    personnel_id: Optional[int] = None


# Output schema representing a purchase order.
# supplier / personnel are null when the referenced record no longer exists.
class OrderResponse(BaseModel):
    id: int
    order_date: date
    product_code: str
    product_name: str
    quantity_ordered: int
    supplier_id: int
    personnel_id: int
    supplier: Optional[OrderSupplierOut] = None
    personnel: Optional[OrderPersonnelOut] = None

    model_config = ConfigDict(from_attributes=True)


OrderList = List[OrderResponse]
