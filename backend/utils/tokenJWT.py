# utils/tokenJWT.py
from jose import jwt, JWTError
from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from services.access_policy import (
    Principal,
    check_access,
    personnel_role_lookup,
    required_roles_for,
)
from utils.errors import AuthError, ForbiddenError

# Authorization scheme; a missing header is reported as 401 by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

# Validate a bearer token and return the principal it was issued for
def authenticate(token: Optional[str]) -> Principal:
    if not token:
        raise AuthError("Unauthorized - No token provided")
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise AuthError("Unauthorized - Invalid token")

    email = payload.get("sub")
    # Ensure email is present in the token payload
    if not email:
        raise AuthError("Unauthorized - Invalid token")
    return Principal(email=email, personnel_id=payload.get("pid"))

# Retrieve the currently authenticated principal based on the JWT token
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    return authenticate(credentials.credentials if credentials else None)

# Dependency factory running the access policy gate for a named operation
def policy_required(operation: str):
    required = required_roles_for(operation)

    def _checker(
        current_user: Principal = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> Principal:
        decision = check_access(current_user, required, personnel_role_lookup(db))
        if not decision.allowed:
            raise ForbiddenError(decision.reason)
        return current_user
    return _checker
