"""
Stock ledger: stock entries received against purchase orders and the exits
that consume them.

``StockRecord.quantity`` always holds what is left on the record. An exit
subtracts from it and stamps ``exit_date``; the record then stops counting
towards available stock but keeps its remaining quantity for history.

Rules:
    - entry quantity is a positive integer, the order must exist
    - receiving more than the order asked for is allowed
    - an exit may never take more than the record currently holds
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, List, Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session, joinedload

from models.order import PurchaseOrder
from models.stock import StockRecord
from services.order_ledger import order_exists
from utils.errors import (
    InsufficientStock,
    OrderNotFound,
    StockNotFound,
    ValidationError,
)

logger = logging.getLogger(__name__)

STOCK_FIELDS = ("entry_date", "exit_date", "quantity", "order_id")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_date(name: str, value: Any) -> None:
    if not isinstance(value, date):
        raise ValidationError(f"{name} must be an ISO-8601 date")


def _load_options():
    return (
        joinedload(StockRecord.order).joinedload(PurchaseOrder.supplier),
        joinedload(StockRecord.order).joinedload(PurchaseOrder.personnel),
    )


def create_entry(db: Session, *, entry_date: date, quantity: int, order_id: int) -> StockRecord:
    _require_date("entry_date", entry_date)
    if not _is_int(quantity) or quantity <= 0:
        raise ValidationError("quantity must be a positive integer")
    if order_id is None or not order_exists(db, order_id):
        raise OrderNotFound()

    record = StockRecord(entry_date=entry_date, exit_date=None, quantity=quantity, order_id=order_id)
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Stock entry %s: +%s for order %s", record.id, quantity, order_id)
    return record


def get_stock(db: Session, stock_id: int) -> StockRecord:
    record = (
        db.query(StockRecord)
        .options(*_load_options())
        .filter(StockRecord.id == stock_id)
        .first()
    )
    if record is None:
        raise StockNotFound()
    return record


def list_stocks(
    db: Session,
    *,
    order_id: Optional[int] = None,
    open_only: bool = False,
) -> List[StockRecord]:
    query = db.query(StockRecord).options(*_load_options())
    if order_id is not None:
        query = query.filter(StockRecord.order_id == order_id)
    if open_only:
        query = query.filter(StockRecord.exit_date.is_(None))
    return query.order_by(StockRecord.id.asc()).all()


def record_exit(db: Session, stock_id: int, *, exit_date: date, quantity: int) -> StockRecord:
    """
    Take ``quantity`` out of a stock record.

    The check and the decrement run as one conditional UPDATE, so two
    concurrent exits against the same record can never both succeed on the
    same starting quantity. Nothing is written when the record holds less
    than requested.
    """
    _require_date("exit_date", exit_date)
    if not _is_int(quantity) or quantity <= 0:
        raise ValidationError("quantity must be a positive integer")

    result = db.execute(
        update(StockRecord)
        .where(StockRecord.id == stock_id)
        .where(StockRecord.quantity >= quantity)
        .values(quantity=StockRecord.quantity - quantity, exit_date=exit_date)
        .execution_options(synchronize_session=False)
    )

    if result.rowcount != 1:
        db.rollback()
        current = db.execute(
            select(StockRecord.quantity).where(StockRecord.id == stock_id)
        ).scalar_one_or_none()
        if current is None:
            raise StockNotFound()
        logger.warning(
            "Rejected exit of %s from stock %s holding %s", quantity, stock_id, current
        )
        raise InsufficientStock(
            f"Insufficient stock: requested {quantity}, available {current}"
        )

    db.commit()
    logger.info("Stock exit %s: -%s on %s", stock_id, quantity, exit_date)
    return get_stock(db, stock_id)


def update_stock(db: Session, stock_id: int, fields: Mapping[str, Any]) -> StockRecord:
    unknown = sorted(set(fields) - set(STOCK_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown stock fields: {', '.join(unknown)}")

    record = db.query(StockRecord).filter(StockRecord.id == stock_id).first()
    if record is None:
        raise StockNotFound()

    if "entry_date" in fields:
        _require_date("entry_date", fields["entry_date"])
    if "exit_date" in fields and fields["exit_date"] is not None:
        _require_date("exit_date", fields["exit_date"])
    if "quantity" in fields:
        if not _is_int(fields["quantity"]) or fields["quantity"] < 0:
            raise ValidationError("quantity must be a non-negative integer")
    if "order_id" in fields and fields["order_id"] != record.order_id:
        if fields["order_id"] is None or not order_exists(db, fields["order_id"]):
            raise OrderNotFound()

    for key, value in fields.items():
        setattr(record, key, value)
    db.commit()
    return get_stock(db, stock_id)


def delete_stock(db: Session, stock_id: int) -> None:
    record = db.query(StockRecord).filter(StockRecord.id == stock_id).first()
    if record is None:
        raise StockNotFound()
    db.delete(record)
    db.commit()
    logger.info("Stock entry %s deleted", stock_id)
