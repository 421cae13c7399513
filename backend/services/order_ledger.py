"""
Order ledger: purchase orders issued by staff to suppliers.

Updates never cascade into stock records that point at the order, and
deleting an order leaves those records in place.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy.orm import Session, joinedload

from models.order import PurchaseOrder
from utils.errors import OrderNotFound, ValidationError

logger = logging.getLogger(__name__)

ORDER_FIELDS = (
    "order_date",
    "product_code",
    "product_name",
    "quantity_ordered",
    "supplier_id",
    "personnel_id",
)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _validate_quantity(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError("quantity_ordered must be a positive integer")


def _validate_fields(fields: Mapping[str, Any], *, partial: bool) -> Dict[str, Any]:
    unknown = sorted(set(fields) - set(ORDER_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown order fields: {', '.join(unknown)}")

    checked = ORDER_FIELDS if not partial else tuple(f for f in ORDER_FIELDS if f in fields)
    missing = [f for f in checked if _is_blank(fields.get(f))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    if "quantity_ordered" in checked:
        _validate_quantity(fields["quantity_ordered"])
    if "order_date" in checked and not isinstance(fields["order_date"], date):
        raise ValidationError("order_date must be an ISO-8601 date")
    return {f: fields[f] for f in checked}


def create_order(db: Session, fields: Mapping[str, Any]) -> PurchaseOrder:
    values = _validate_fields(fields, partial=False)
    order = PurchaseOrder(**values)
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order %s created for product %s", order.id, order.product_code)
    return order


def get_order(db: Session, order_id: int) -> PurchaseOrder:
    order = (
        db.query(PurchaseOrder)
        .options(joinedload(PurchaseOrder.supplier), joinedload(PurchaseOrder.personnel))
        .filter(PurchaseOrder.id == order_id)
        .first()
    )
    if order is None:
        raise OrderNotFound()
    return order


def order_exists(db: Session, order_id: int) -> bool:
    return db.query(PurchaseOrder.id).filter(PurchaseOrder.id == order_id).first() is not None


def list_orders(
    db: Session,
    *,
    personnel_id: Optional[int] = None,
    supplier_id: Optional[int] = None,
) -> List[PurchaseOrder]:
    query = db.query(PurchaseOrder).options(
        joinedload(PurchaseOrder.supplier), joinedload(PurchaseOrder.personnel)
    )
    if personnel_id is not None:
        query = query.filter(PurchaseOrder.personnel_id == personnel_id)
    if supplier_id is not None:
        query = query.filter(PurchaseOrder.supplier_id == supplier_id)
    return query.order_by(PurchaseOrder.id.asc()).all()


def update_order(db: Session, order_id: int, fields: Mapping[str, Any]) -> PurchaseOrder:
    order = get_order(db, order_id)
    values = _validate_fields(fields, partial=True)
    for key, value in values.items():
        setattr(order, key, value)
    db.commit()
    db.refresh(order)
    return order


def delete_order(db: Session, order_id: int) -> None:
    order = db.query(PurchaseOrder).filter(PurchaseOrder.id == order_id).first()
    if order is None:
        raise OrderNotFound()
    db.delete(order)
    db.commit()
    logger.info("Order %s deleted", order_id)
