# routes/reports.py
from datetime import date
from typing import Optional, List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from services import reporting
from services.access_policy import Principal
from utils.tokenJWT import policy_required
from schemas.reports import LowStockItem, MovementEventItem, StockSummaryItem

router = APIRouter(prefix="/reports", tags=["Reports"])

# -----------------------------
# 1) Stock summary per product
# -----------------------------
@router.get("/stock-summary", response_model=List[StockSummaryItem])
def report_stock_summary(
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("reports.stock_summary")),
):
    return reporting.stock_summary(db)

# -----------------------------
# 2) Low stock alerts
# -----------------------------
@router.get("/low-stock-alerts", response_model=List[LowStockItem])
def report_low_stock_alerts(
    threshold: Optional[int] = Query(None, ge=1, description="Alert when available quantity < threshold"),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("reports.low_stock_alerts")),
):
    if threshold is None:
        threshold = settings.LOW_STOCK_THRESHOLD
    return reporting.low_stock_alerts(db, threshold=threshold)

# -----------------------------
# 3) Stock movement in a date window (admin / manager)
# -----------------------------
@router.get("/stock-movement", response_model=List[MovementEventItem])
def report_stock_movement(
    start_date: Optional[date] = Query(None, alias="startDate", description="YYYY-MM-DD, inclusive"),
    end_date: Optional[date] = Query(None, alias="endDate", description="YYYY-MM-DD, inclusive"),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("reports.stock_movement")),
):
    return reporting.stock_movement(db, start_date, end_date)
