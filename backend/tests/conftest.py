import os

# Must be set before config/database are imported: one shared in-memory DB
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["LOW_STOCK_THRESHOLD"] = "10"

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from database import Base, SessionLocal, engine
from main import app
from models.order import PurchaseOrder
from models.personnel import Personnel
from models.stock import StockRecord
from models.supplier import Supplier
from utils.tokenJWT import create_access_token


@pytest.fixture(autouse=True)
def fresh_schema():
    """
    Every test starts from empty tables.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="function")
def db_session() -> Session:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


# ---------- master data / ledger factories ----------
@pytest.fixture
def make_personnel(db_session):
    counter = {"n": 0}

    def _make(role="staff", first_name="Ayse", last_name="Yilmaz", email=None):
        counter["n"] += 1
        person = Personnel(
            first_name=first_name,
            last_name=last_name,
            email=email or f"person{counter['n']}@example.com",
            # never used for login in these tests
            password_hash="not-a-real-hash",
            role=role,
        )
        db_session.add(person)
        db_session.commit()
        db_session.refresh(person)
        return person

    return _make


@pytest.fixture
def make_supplier(db_session):
    def _make(name="Acme Parts", phone="+90 212 555 0101"):
        supplier = Supplier(name=name, phone=phone)
        db_session.add(supplier)
        db_session.commit()
        db_session.refresh(supplier)
        return supplier

    return _make


@pytest.fixture
def make_order(db_session, make_supplier, make_personnel):
    def _make(product_code="P-100", product_name="Hex bolt M8", quantity_ordered=100,
              supplier=None, personnel=None, order_date=date(2024, 1, 1)):
        supplier = supplier or make_supplier()
        personnel = personnel or make_personnel()
        order = PurchaseOrder(
            order_date=order_date,
            product_code=product_code,
            product_name=product_name,
            quantity_ordered=quantity_ordered,
            supplier_id=supplier.id,
            personnel_id=personnel.id,
        )
        db_session.add(order)
        db_session.commit()
        db_session.refresh(order)
        return order

    return _make


@pytest.fixture
def make_stock(db_session):
    def _make(order, quantity, entry_date=date(2024, 1, 1), exit_date=None):
        record = StockRecord(order_id=order.id,
                             quantity=quantity, entry_date=entry_date, exit_date=exit_date)
        db_session.add(record)
        db_session.commit()
        db_session.refresh(record)
        return record

    return _make


# ---------- auth helpers ----------
def bearer_for(person: Personnel) -> dict:
    token = create_access_token({"sub": person.email, "pid": person.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return bearer_for


@pytest.fixture
def staff_headers(make_personnel):
    return bearer_for(make_personnel(role="staff"))


@pytest.fixture
def manager_headers(make_personnel):
    return bearer_for(make_personnel(role="manager"))


@pytest.fixture
def admin_headers(make_personnel):
    return bearer_for(make_personnel(role="admin"))
