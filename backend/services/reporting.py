"""
Reporting engine: read-only views over the stock ledger.

Every report is built fresh from the stock records joined with their orders
(and the orders' suppliers / personnel). Joins are resolved in bulk and a
broken reference never fails the report: the row either drops out (no
product code to group on) or shows a placeholder.

    stock_summary      -> one row per product code, total and available qty
    low_stock_alerts   -> products whose available qty is below a threshold
    stock_movement     -> entry / exit events inside a date window
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import Session

from models.order import PurchaseOrder
from models.personnel import Personnel
from models.stock import StockRecord
from models.supplier import Supplier
from utils.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_LOW_STOCK_THRESHOLD = 10

UNKNOWN = "Unknown"
UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN_SUPPLIER = "Unknown Supplier"
NO_PHONE = "N/A"

ENTRY = "entry"
EXIT = "exit"


@dataclass
class ProductSummary:
    product_code: str
    product_name: str
    supplier: str
    total_quantity: int = 0
    available_quantity: int = 0
    last_entry_date: Optional[date] = None


@dataclass
class LowStockItem:
    product_code: str
    product_name: str
    supplier: str
    supplier_phone: str
    available_quantity: int = 0


@dataclass
class MovementEvent:
    date: date
    product_code: str
    product_name: str
    quantity: int
    type: str
    personnel: str


class _Joined:
    """Stock records plus the orders, suppliers and personnel they point at."""

    def __init__(self, db: Session):
        self.records: List[StockRecord] = (
            db.query(StockRecord).order_by(StockRecord.id.asc()).all()
        )
        order_ids = {r.order_id for r in self.records}
        self.orders: Dict[int, PurchaseOrder] = _by_id(
            db.query(PurchaseOrder).filter(PurchaseOrder.id.in_(order_ids)).all()
            if order_ids else []
        )
        supplier_ids = {o.supplier_id for o in self.orders.values()}
        self.suppliers: Dict[int, Supplier] = _by_id(
            db.query(Supplier).filter(Supplier.id.in_(supplier_ids)).all()
            if supplier_ids else []
        )
        personnel_ids = {o.personnel_id for o in self.orders.values()}
        self.personnel: Dict[int, Personnel] = _by_id(
            db.query(Personnel).filter(Personnel.id.in_(personnel_ids)).all()
            if personnel_ids else []
        )

    def order_of(self, record: StockRecord) -> Optional[PurchaseOrder]:
        return self.orders.get(record.order_id)

    def supplier_of(self, order: Optional[PurchaseOrder]) -> Optional[Supplier]:
        return self.suppliers.get(order.supplier_id) if order else None

    def personnel_of(self, order: Optional[PurchaseOrder]) -> Optional[Personnel]:
        return self.personnel.get(order.personnel_id) if order else None


def _by_id(rows: Iterable) -> Dict[int, object]:
    return {row.id: row for row in rows}


def _product_name(order: PurchaseOrder, fallback: str) -> str:
    return order.product_name or fallback


def stock_summary(db: Session) -> List[ProductSummary]:
    joined = _Joined(db)
    summary: Dict[str, ProductSummary] = {}

    for record in joined.records:
        order = joined.order_of(record)
        if order is None or not order.product_code:
            continue

        row = summary.get(order.product_code)
        if row is None:
            supplier = joined.supplier_of(order)
            row = summary[order.product_code] = ProductSummary(
                product_code=order.product_code,
                product_name=_product_name(order, UNKNOWN_PRODUCT),
                supplier=(supplier.name if supplier and supplier.name else UNKNOWN_SUPPLIER),
            )

        row.total_quantity += record.quantity
        if record.exit_date is None:
            row.available_quantity += record.quantity
        if row.last_entry_date is None or record.entry_date > row.last_entry_date:
            row.last_entry_date = record.entry_date

    return list(summary.values())


def low_stock_alerts(db: Session, threshold: Optional[int] = None) -> List[LowStockItem]:
    if threshold is None:
        threshold = DEFAULT_LOW_STOCK_THRESHOLD
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
        raise ValidationError("threshold must be an integer of at least 1")

    joined = _Joined(db)
    by_product: Dict[str, LowStockItem] = {}

    for record in joined.records:
        order = joined.order_of(record)
        if order is None or not order.product_code:
            continue

        item = by_product.get(order.product_code)
        if item is None:
            supplier = joined.supplier_of(order)
            item = by_product[order.product_code] = LowStockItem(
                product_code=order.product_code,
                product_name=_product_name(order, UNKNOWN_PRODUCT),
                supplier=(supplier.name if supplier and supplier.name else UNKNOWN_SUPPLIER),
                supplier_phone=(supplier.phone if supplier and supplier.phone else NO_PHONE),
            )

        if record.exit_date is None:
            item.available_quantity += record.quantity

    return [item for item in by_product.values() if item.available_quantity < threshold]


def _in_window(value: Optional[date], start: date, end: date) -> bool:
    return value is not None and start <= value <= end


def stock_movement(db: Session, start_date: Optional[date], end_date: Optional[date]) -> List[MovementEvent]:
    if start_date is None or end_date is None:
        raise ValidationError("Start date and end date are required")

    joined = _Joined(db)
    events: List[MovementEvent] = []

    for record in joined.records:
        entry_hit = _in_window(record.entry_date, start_date, end_date)
        exit_hit = _in_window(record.exit_date, start_date, end_date)
        if not (entry_hit or exit_hit):
            continue

        order = joined.order_of(record)
        person = joined.personnel_of(order)
        product_code = order.product_code if order and order.product_code else UNKNOWN
        product_name = order.product_name if order and order.product_name else UNKNOWN
        personnel = person.full_name if person else UNKNOWN

        if entry_hit:
            events.append(MovementEvent(record.entry_date, product_code, product_name,
                                        record.quantity, ENTRY, personnel))
        if exit_hit:
            events.append(MovementEvent(record.exit_date, product_code, product_name,
                                        record.quantity, EXIT, personnel))

    # sorted() is stable: equal dates keep record id order, entry before exit
    events = sorted(events, key=lambda e: e.date)
    logger.debug("Stock movement %s..%s: %d events", start_date, end_date, len(events))
    return events
