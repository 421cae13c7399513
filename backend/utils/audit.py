import logging

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from models.log import Log

logger = logging.getLogger(__name__)


def client_ip(request: Request):
    return request.client.host if request and request.client else None


def write_log(db: Session, *, personnel_id, action, resource, status="SUCCESS", ip=None, meta=None):
    entry = Log(personnel_id=personnel_id, action=action, resource=resource, status=status, ip=ip, meta=meta or {})
    db.add(entry)
    try:
        db.commit()
    except SQLAlchemyError:
        # ledger change already committed
        db.rollback()
        logger.exception("Failed to write audit log %s/%s", resource, action)
