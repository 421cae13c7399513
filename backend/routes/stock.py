# backend/routes/stock.py
from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional, List

from database import get_db
from services import stock_ledger
from services.access_policy import Principal
from utils.tokenJWT import policy_required
from utils.audit import write_log, client_ip
import schemas.stock as stock_schemas

router = APIRouter(prefix="/stocks", tags=["Stock"])


# List stock records, optionally for one order or only those still in inventory
@router.get("", response_model=List[stock_schemas.StockResponse])
def list_stocks(
    order_id: Optional[int] = Query(None),
    open_only: bool = Query(False, description="Only records without an exit date"),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("stocks.read")),
):
    return stock_ledger.list_stocks(db, order_id=order_id, open_only=open_only)


@router.get("/{stock_id}", response_model=stock_schemas.StockResponse)
def get_stock(
    stock_id: int,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("stocks.read")),
):
    return stock_ledger.get_stock(db, stock_id)


# Register goods received against a purchase order
@router.post("", response_model=stock_schemas.StockResponse, status_code=status.HTTP_201_CREATED)
def create_stock_entry(
    payload: stock_schemas.StockEntryCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("stocks.create")),
):
    record = stock_ledger.create_entry(
        db, entry_date=payload.entry_date, quantity=payload.quantity, order_id=payload.order_id
    )
    write_log(db, personnel_id=current_user.personnel_id, action="STOCK_ENTRY", resource="stock",
              ip=client_ip(request), meta={"id": record.id, "qty": record.quantity, "order_id": record.order_id})
    return stock_ledger.get_stock(db, record.id)


# Rewrite a stock record (dates, quantity, order reference)
@router.put("/{stock_id}", response_model=stock_schemas.StockResponse)
def update_stock(
    stock_id: int,
    payload: stock_schemas.StockUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("stocks.update")),
):
    changes = payload.model_dump(exclude_unset=True)
    record = stock_ledger.update_stock(db, stock_id, changes)
    write_log(db, personnel_id=current_user.personnel_id, action="STOCK_UPDATE", resource="stock",
              ip=client_ip(request), meta={"id": record.id, "fields": sorted(changes)})
    return stock_ledger.get_stock(db, record.id)


# Take goods out of a stock record; 409 when it holds less than requested
@router.patch("/{stock_id}/exit", response_model=stock_schemas.StockResponse)
def record_stock_exit(
    stock_id: int,
    payload: stock_schemas.StockExit,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("stocks.exit")),
):
    record = stock_ledger.record_exit(db, stock_id, exit_date=payload.exit_date, quantity=payload.quantity)
    write_log(db, personnel_id=current_user.personnel_id, action="STOCK_EXIT", resource="stock",
              ip=client_ip(request), meta={"id": record.id, "qty": payload.quantity, "remaining": record.quantity})
    return stock_ledger.get_stock(db, record.id)


@router.delete("/{stock_id}")
def delete_stock(
    stock_id: int,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("stocks.delete")),
):
    stock_ledger.delete_stock(db, stock_id)
    write_log(db, personnel_id=current_user.personnel_id, action="STOCK_DELETE", resource="stock",
              ip=client_ip(request), meta={"id": stock_id})
    return {"message": "Stock entry deleted successfully"}
