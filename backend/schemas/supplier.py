from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class SupplierCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None


class SupplierUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None


class SupplierOut(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
