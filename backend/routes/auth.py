# backend/routes/auth.py
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session
from sqlalchemy import func
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import create_access_token, get_current_user
from utils.audit import write_log, client_ip
from utils.errors import AuthError, DuplicateEmail, PersonnelNotFound
from services.access_policy import DEFAULT_ROLE, Principal
from models.personnel import Personnel
from schemas import personnel as schemas
from database import get_db

router = APIRouter(prefix="/auth", tags=["Auth"])

# Register a new staff member
@router.post("/register", response_model=schemas.PersonnelResponse, status_code=status.HTTP_201_CREATED)
def register(payload: schemas.PersonnelRegister, request: Request, db: Session = Depends(get_db)):
    # Normalize email input
    normalized_email = payload.email.strip().lower()

    # Check for existing account
    existing = db.query(Personnel).filter(func.lower(Personnel.email) == normalized_email).first()
    if existing:
        write_log(db, personnel_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": normalized_email, "reason": "Email exists"})
        raise DuplicateEmail()

    person = Personnel(
        email=normalized_email,
        password_hash=get_password_hash(payload.password),
        role=DEFAULT_ROLE.value,
        first_name=payload.first_name,
        last_name=payload.last_name,
        phone=payload.phone,
        company_id=payload.company_id,
    )
    db.add(person)
    db.commit()
    db.refresh(person)

    write_log(db, personnel_id=person.id, action="REGISTER", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": person.email})
    return person


# Authenticate and issue a JWT bearer token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.PersonnelLogin, request: Request, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    person = db.query(Personnel).filter(Personnel.email == email).first()

    # Validate credentials and log failure on error
    if not person or not verify_password(payload.password, person.password_hash):
        write_log(db, personnel_id=(person.id if person else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=client_ip(request), meta={"email": email})
        raise AuthError("Invalid credentials")

    access_token = create_access_token(data={"sub": person.email, "pid": person.id})

    write_log(db, personnel_id=person.id, action="LOGIN", resource="auth",
              status="SUCCESS", ip=client_ip(request), meta={"email": person.email})

    return {"access_token": access_token, "token_type": "bearer"}


# Retrieve the profile behind the current token
@router.get("/me", response_model=schemas.PersonnelResponse)
def me(current_user: Principal = Depends(get_current_user), db: Session = Depends(get_db)):
    person = db.query(Personnel).filter(Personnel.email == current_user.email).first()
    if person is None:
        raise PersonnelNotFound()
    return person
