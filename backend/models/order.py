from sqlalchemy import Column, Integer, String, Date, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base


# Purchase order issued by a staff member to a supplier.
# Supplier and personnel are referenced by id only: deleting master data
# never cascades into the ledger, reads fall back to placeholders instead.
class PurchaseOrder(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    order_date = Column(Date, nullable=False)

    product_code = Column(String, nullable=False, index=True)
    product_name = Column(String, nullable=False)
    quantity_ordered = Column(Integer, CheckConstraint("quantity_ordered > 0"), nullable=False)

    supplier_id = Column(Integer, nullable=False, index=True)
    personnel_id = Column(Integer, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    supplier = relationship(
        "Supplier",
        primaryjoin="foreign(PurchaseOrder.supplier_id) == Supplier.id",
        viewonly=True,
        uselist=False,
    )
    personnel = relationship(
        "Personnel",
        primaryjoin="foreign(PurchaseOrder.personnel_id) == Personnel.id",
        viewonly=True,
        uselist=False,
    )
