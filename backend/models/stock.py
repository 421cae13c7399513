# backend/models/stock.py
from sqlalchemy import Column, Integer, Date, DateTime, CheckConstraint, func
from sqlalchemy.orm import relationship
from database import Base

class StockRecord(Base):
    __tablename__ = "stocks"

    id = Column(Integer, primary_key=True, index=True)

    entry_date = Column(Date, nullable=False, index=True)
    # NULL = still in inventory (open record)
    exit_date = Column(Date, nullable=True, index=True)

    # Remaining quantity: the entered amount minus every recorded exit
    quantity = Column(Integer, CheckConstraint("quantity >= 0"), nullable=False)

    # Orders may be deleted under a stock record, the id is kept as-is
    order_id = Column(Integer, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    order = relationship(
        "PurchaseOrder",
        primaryjoin="foreign(StockRecord.order_id) == PurchaseOrder.id",
        viewonly=True,
        uselist=False,
    )

    @property
    def is_open(self) -> bool:
        return self.exit_date is None
