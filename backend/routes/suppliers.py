# backend/routes/suppliers.py
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from database import get_db
from models.supplier import Supplier
from services.access_policy import Principal
from utils.tokenJWT import policy_required
from utils.audit import write_log, client_ip
from utils.errors import SupplierNotFound
from schemas.supplier import SupplierCreate, SupplierOut, SupplierUpdate

router = APIRouter(prefix="/suppliers", tags=["Suppliers"])

_manage = policy_required("suppliers.manage")


def _get_or_404(db: Session, supplier_id: int) -> Supplier:
    s = db.query(Supplier).filter(Supplier.id == supplier_id).first()
    if not s:
        raise SupplierNotFound()
    return s


@router.get("", response_model=List[SupplierOut])
def list_suppliers(db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    return db.query(Supplier).order_by(Supplier.name.asc()).all()


@router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier(supplier_id: int, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    return _get_or_404(db, supplier_id)


@router.post("", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier(payload: SupplierCreate, request: Request, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    s = Supplier(**payload.model_dump())
    db.add(s)
    db.commit()
    db.refresh(s)
    write_log(db, personnel_id=current_user.personnel_id, action="SUPPLIER_CREATE", resource="supplier",
              ip=client_ip(request), meta={"supplier_id": s.id})
    return s


@router.put("/{supplier_id}", response_model=SupplierOut)
def update_supplier(supplier_id: int, payload: SupplierUpdate, request: Request, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    s = _get_or_404(db, supplier_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key == "name" and value is None:
            continue
        setattr(s, key, value)
    db.commit()
    db.refresh(s)
    write_log(db, personnel_id=current_user.personnel_id, action="SUPPLIER_UPDATE", resource="supplier",
              ip=client_ip(request), meta={"supplier_id": s.id})
    return s


# Orders keep pointing at a deleted supplier; reports show "Unknown Supplier"
@router.delete("/{supplier_id}")
def delete_supplier(supplier_id: int, request: Request, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    s = _get_or_404(db, supplier_id)
    db.delete(s)
    db.commit()
    write_log(db, personnel_id=current_user.personnel_id, action="SUPPLIER_DELETE", resource="supplier",
              ip=client_ip(request), meta={"supplier_id": supplier_id})
    return {"message": "Supplier deleted successfully"}
