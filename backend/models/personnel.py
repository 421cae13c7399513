# backend/models/personnel.py
from sqlalchemy import Column, Integer, String, CheckConstraint
from sqlalchemy.orm import relationship
from database import Base

# Represents a staff member of a company: login credentials, contact details
# and the role used by the access policy (admin / manager / staff)
class Personnel(Base):
    __tablename__ = "personnel"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(
        String,
        CheckConstraint("role IN ('admin', 'manager', 'staff')"),
        nullable=True,
        default="staff",
    )

    # Companies are master data owned elsewhere, a dangling id is tolerated
    company_id = Column(Integer, nullable=True, index=True)

    company = relationship(
        "Company",
        primaryjoin="foreign(Personnel.company_id) == Company.id",
        viewonly=True,
        uselist=False,
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
