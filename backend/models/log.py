from sqlalchemy import Column, Integer, String, DateTime, JSON, func
from sqlalchemy.orm import relationship
from database import Base

# Audit trail of authentication events and ledger mutations
class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)

    # Event timestamp and core action details
    ts = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    personnel_id = Column(Integer, nullable=True, index=True)
    action = Column(String(50), index=True)
    resource = Column(String(50), index=True)
    status = Column(String(20), index=True)
    ip = Column(String(64), nullable=True)

    # JSON container for flexible context data
    meta = Column(JSON, nullable=True)

    # Acting staff member, None once the personnel record is gone
    personnel = relationship(
        "Personnel",
        primaryjoin="foreign(Log.personnel_id) == Personnel.id",
        viewonly=True,
        lazy="joined",
        uselist=False,
    )
