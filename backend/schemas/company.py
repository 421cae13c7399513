from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


# Schema for registering a company
class CompanyCreate(BaseModel):
    name: str = Field(min_length=1)
    tax_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None


# Schema for displaying company details
class CompanyOut(BaseModel):
    id: int
    name: str
    tax_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


# Schema for updating company information
class CompanyUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    tax_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
