# backend/routes/orders.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from database import get_db
from services import order_ledger
from services.access_policy import Principal
from utils.tokenJWT import policy_required
from utils.audit import write_log, client_ip
from schemas.order import OrderCreate, OrderResponse, OrderUpdate

router = APIRouter(prefix="/orders", tags=["Orders"])


# Retrieve all purchase orders, optionally narrowed to one staff member or supplier
@router.get("", response_model=List[OrderResponse])
def list_orders(
    personnel_id: Optional[int] = Query(None),
    supplier_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("orders.read")),
):
    return order_ledger.list_orders(db, personnel_id=personnel_id, supplier_id=supplier_id)


# Orders issued by a staff member
@router.get("/personnel/{personnel_id}", response_model=List[OrderResponse])
def list_orders_by_personnel(
    personnel_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("orders.read")),
):
    return order_ledger.list_orders(db, personnel_id=personnel_id)


# Orders issued to a supplier
@router.get("/supplier/{supplier_id}", response_model=List[OrderResponse])
def list_orders_by_supplier(
    supplier_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("orders.read")),
):
    return order_ledger.list_orders(db, supplier_id=supplier_id)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("orders.read")),
):
    return order_ledger.get_order(db, order_id)


# Issue a new purchase order
@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    payload: OrderCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("orders.create")),
):
    order = order_ledger.create_order(db, payload.model_dump())
    write_log(db, personnel_id=current_user.personnel_id, action="ORDER_CREATE", resource="orders",
              ip=client_ip(request), meta={"order_id": order.id, "product_code": order.product_code})
    return order_ledger.get_order(db, order.id)


# Update an order; existing stock records are not touched
@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: int,
    payload: OrderUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("orders.update")),
):
    changes = payload.model_dump(exclude_unset=True)
    order = order_ledger.update_order(db, order_id, changes)
    write_log(db, personnel_id=current_user.personnel_id, action="ORDER_UPDATE", resource="orders",
              ip=client_ip(request), meta={"order_id": order.id, "fields": sorted(changes)})
    return order_ledger.get_order(db, order.id)


# Delete an order; stock records that reference it are kept
@router.delete("/{order_id}")
def delete_order(
    order_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("orders.delete")),
):
    order_ledger.delete_order(db, order_id)
    write_log(db, personnel_id=current_user.personnel_id, action="ORDER_DELETE", resource="orders",
              ip=client_ip(request), meta={"order_id": order_id})
    return {"message": "Order deleted successfully"}
