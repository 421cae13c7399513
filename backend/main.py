# backend/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from dotenv import load_dotenv

load_dotenv()

from config import settings
from database import init_db
from utils.errors import AppError, StorageError

# Import routerów
from routes.auth import router as auth_router
from routes.company import router as company_router
from routes.personnel import router as personnel_router
from routes.suppliers import router as suppliers_router
from routes.orders import router as orders_router
from routes.stock import router as stock_router
from routes.reports import router as reports_router
from routes.logs import router as logs_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Inicjalizacja
init_db()

app = FastAPI(title="Stock Ledger API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error handling ---
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
        for e in exc.errors()
    ]
    logger.info("Validation failed for %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation failed", "errors": jsonable_encoder(errors)},
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": StorageError.default_message})


# Rejestracja routerów
app.include_router(auth_router)
app.include_router(company_router)
app.include_router(personnel_router)
app.include_router(suppliers_router)
app.include_router(orders_router)
app.include_router(stock_router)
app.include_router(reports_router)
app.include_router(logs_router)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/")
def read_root():
    return {"message": "Stock Ledger API is running"}
