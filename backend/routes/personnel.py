# backend/routes/personnel.py
from fastapi import APIRouter, Depends, Query, Request
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from database import get_db
from models.personnel import Personnel
from services.access_policy import Principal
from utils.tokenJWT import policy_required
from utils.audit import write_log, client_ip
from utils.errors import DuplicateEmail, PersonnelNotFound, ValidationError
from schemas.personnel import PersonnelResponse, PersonnelUpdate, RoleUpdate

router = APIRouter(prefix="/personnel", tags=["Personnel"])

_manage = policy_required("personnel.manage")


def _get_or_404(db: Session, personnel_id: int) -> Personnel:
    person = db.query(Personnel).filter(Personnel.id == personnel_id).first()
    if not person:
        raise PersonnelNotFound()
    return person


# Retrieve personnel, optionally filtered by e-mail fragment or role
@router.get("", response_model=List[PersonnelResponse])
def list_personnel(
    q: Optional[str] = Query(None, description="Search by e-mail"),
    role: Optional[str] = Query(None, description="Filter by role"),
    db: Session = Depends(get_db),
    current_user: Principal = Depends(_manage),
):
    query = db.query(Personnel)
    if q:
        query = query.filter(Personnel.email.ilike(f"%{q.lower()}%"))
    if role:
        query = query.filter(Personnel.role == role.lower())
    return query.order_by(Personnel.id.asc()).all()


# Staff members of a single company
@router.get("/company/{company_id}", response_model=List[PersonnelResponse])
def list_company_personnel(company_id: int, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    return (
        db.query(Personnel)
        .filter(Personnel.company_id == company_id)
        .order_by(Personnel.id.asc())
        .all()
    )


@router.get("/{personnel_id}", response_model=PersonnelResponse)
def get_personnel(personnel_id: int, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    return _get_or_404(db, personnel_id)


# Update contact details of a staff member
@router.put("/{personnel_id}", response_model=PersonnelResponse)
def update_personnel(
    personnel_id: int,
    payload: PersonnelUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(_manage),
):
    person = _get_or_404(db, personnel_id)
    changes = payload.model_dump(exclude_unset=True)

    for key in ("first_name", "last_name", "email"):
        if key in changes and changes[key] is None:
            raise ValidationError(f"{key} cannot be empty")

    if changes.get("email"):
        changes["email"] = changes["email"].strip().lower()
        taken = (
            db.query(Personnel)
            .filter(func.lower(Personnel.email) == changes["email"], Personnel.id != person.id)
            .first()
        )
        if taken:
            raise DuplicateEmail()

    for key, value in changes.items():
        setattr(person, key, value)
    db.commit()
    db.refresh(person)

    write_log(db, personnel_id=current_user.personnel_id, action="PERSONNEL_UPDATE", resource="personnel",
              ip=client_ip(request), meta={"personnel_id": person.id})
    return person


# Change the role of a staff member (admin only)
@router.put("/{personnel_id}/role", response_model=PersonnelResponse)
def update_personnel_role(
    personnel_id: int,
    new_role: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: Principal = Depends(policy_required("personnel.change_role")),
):
    person = _get_or_404(db, personnel_id)
    person.role = new_role.role
    db.commit()
    db.refresh(person)

    write_log(db, personnel_id=current_user.personnel_id, action="ROLE_CHANGE", resource="personnel",
              ip=client_ip(request), meta={"personnel_id": person.id, "role": person.role})
    return person


# Delete a staff member; orders issued by them stay in the ledger
@router.delete("/{personnel_id}")
def delete_personnel(personnel_id: int, request: Request, db: Session = Depends(get_db), current_user: Principal = Depends(_manage)):
    person = _get_or_404(db, personnel_id)

    # Prevent self-deletion
    if person.email == current_user.email:
        raise ValidationError("You cannot delete your own account")

    db.delete(person)
    db.commit()

    write_log(db, personnel_id=current_user.personnel_id, action="PERSONNEL_DELETE", resource="personnel",
              ip=client_ip(request), meta={"personnel_id": personnel_id})
    return {"message": "Personnel deleted successfully"}
