# backend/schemas/stock.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date
from typing import Optional

from schemas.order import OrderResponse

# Schema for registering goods received against an order
class StockEntryCreate(BaseModel):
    entry_date: date
    quantity: int = Field(gt=0)
    order_id: int

# Schema for taking goods out of a stock record
class StockExit(BaseModel):
    exit_date: date
    quantity: int = Field(gt=0)

# Schema for rewriting a stock record, omitted fields are left as they are
class StockUpdate(BaseModel):
    entry_date: Optional[date] = None
    exit_date: Optional[date] = None
    quantity: Optional[int] = Field(default=None, ge=0)
    order_id: Optional[int] = None

# Schema for returning stock record details
class StockResponse(BaseModel):
    id: int
    entry_date: date
    exit_date: Optional[date] = None
    quantity: int
    order_id: int
    # Null once the originating order has been deleted
    order: Optional[OrderResponse] = None

    model_config = ConfigDict(from_attributes=True)
