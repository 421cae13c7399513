# schemas/reports.py
from datetime import date
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict

# Row of the stock summary report, one per product code
class StockSummaryItem(BaseModel):
    product_code: str
    product_name: str
    supplier: str
    total_quantity: int
    available_quantity: int
    last_entry_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)

# Product whose available quantity is below the alert threshold
class LowStockItem(BaseModel):
    product_code: str
    product_name: str
    supplier: str
    supplier_phone: str
    available_quantity: int

    model_config = ConfigDict(from_attributes=True)

# Single entry or exit inside the requested date window
class MovementEventItem(BaseModel):
    date: date
    product_code: str
    product_name: str
    quantity: int
    type: Literal["entry", "exit"]
    personnel: str

    model_config = ConfigDict(from_attributes=True)
