from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal

RoleName = Literal["admin", "manager", "staff"]

# Shared properties for personnel models
class PersonnelBase(BaseModel):
    email: EmailStr

# Schema for authentication credentials
class PersonnelLogin(PersonnelBase):
    password: str

# Schema for self-registration; new accounts always start as staff
class PersonnelRegister(PersonnelBase):
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    phone: Optional[str] = None
    company_id: Optional[int] = None

# Output schema for personnel profile details
class PersonnelResponse(PersonnelBase):
    id: int
    first_name: str
    last_name: str
    phone: Optional[str] = None
    role: Optional[str] = None
    company_id: Optional[int] = None

    class Config:
        from_attributes = True

# Schema for profile updates; role changes go through RoleUpdate
class PersonnelUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    company_id: Optional[int] = None

# Schema for JWT authentication token response
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"

# Schema for administrative role updates
class RoleUpdate(BaseModel):
    role: RoleName
