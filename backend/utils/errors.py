# utils/errors.py
"""
Typed application errors.

Services raise these and never build HTTP responses themselves; the handlers
registered in ``main.py`` turn them into ``{"detail": ...}`` JSON bodies with
the status code carried by the class.
"""
from typing import Optional, Dict


class AppError(Exception):
    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


# 400 - malformed or missing input
class ValidationError(AppError):
    status_code = 400
    default_message = "Validation failed"


# 401 - missing or invalid credential
class AuthError(AppError):
    status_code = 401
    default_message = "Could not validate credentials"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


# 403 - authenticated but not allowed
class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


# 404 - referenced entity absent
class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class OrderNotFound(NotFoundError):
    default_message = "Order not found"


class StockNotFound(NotFoundError):
    default_message = "Stock entry not found"


class SupplierNotFound(NotFoundError):
    default_message = "Supplier not found"


class PersonnelNotFound(NotFoundError):
    default_message = "Personnel not found"


class CompanyNotFound(NotFoundError):
    default_message = "Company not found"


class RoleNotFound(NotFoundError):
    default_message = "User role cannot be verified"


# 409 - request conflicts with stored state
class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class InsufficientStock(ConflictError):
    default_message = "Insufficient stock"


class DuplicateEmail(ConflictError):
    default_message = "Email already registered"


# 500 - storage failure, the message sent to clients stays generic
class StorageError(AppError):
    status_code = 500
    default_message = "Internal Server Error"
