# backend/routes/company.py
from typing import List
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from database import get_db
from models.company import Company
from services.access_policy import Principal
from utils.tokenJWT import policy_required
from utils.audit import write_log, client_ip
from utils.errors import CompanyNotFound
from schemas.company import CompanyCreate, CompanyOut, CompanyUpdate

router = APIRouter(prefix="/companies", tags=["Companies"])

_manage = policy_required("companies.manage")


def _get_or_404(db: Session, company_id: int) -> Company:
    c = db.query(Company).filter(Company.id == company_id).first()
    if not c:
        raise CompanyNotFound()
    return c


# List all companies
@router.get("", response_model=List[CompanyOut])
def list_companies(db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    return db.query(Company).order_by(Company.id.asc()).all()


# Retrieve company details
@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: int, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    return _get_or_404(db, company_id)


# Register a company
@router.post("", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
def create_company(payload: CompanyCreate, request: Request, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    c = Company(**payload.model_dump())
    db.add(c)
    db.commit()
    db.refresh(c)
    write_log(db, personnel_id=current_user.personnel_id, action="COMPANY_CREATE", resource="company",
              ip=client_ip(request), meta={"company_id": c.id})
    return c


# Update company details; only fields present in the payload are changed
@router.put("/{company_id}", response_model=CompanyOut)
def update_company(company_id: int, payload: CompanyUpdate, request: Request, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    c = _get_or_404(db, company_id)
    for key, value in payload.model_dump(exclude_unset=True).items():
        if key == "name" and value is None:
            continue
        setattr(c, key, value)

    db.commit()
    db.refresh(c)
    write_log(db, personnel_id=current_user.personnel_id, action="COMPANY_UPDATE", resource="company",
              ip=client_ip(request), meta={"company_id": c.id})
    return c


# Remove a company; its personnel keep their (now dangling) company id
@router.delete("/{company_id}")
def delete_company(company_id: int, request: Request, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    c = _get_or_404(db, company_id)
    db.delete(c)
    db.commit()
    write_log(db, personnel_id=current_user.personnel_id, action="COMPANY_DELETE", resource="company",
              ip=client_ip(request), meta={"company_id": company_id})
    return {"message": "Company deleted successfully"}
