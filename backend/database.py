# backend/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings

# 1. Adres bazy z ustawień (zmienna środowiskowa / .env) albo domyślny SQLite
SQLALCHEMY_DATABASE_URL = settings.DATABASE_URL

# 2. Heroku/Azure style postgres:// URLs are not accepted by SQLAlchemy
if SQLALCHEMY_DATABASE_URL and SQLALCHEMY_DATABASE_URL.startswith("postgres://"):
    SQLALCHEMY_DATABASE_URL = SQLALCHEMY_DATABASE_URL.replace("postgres://", "postgresql://", 1)

# 3. Konfiguracja zależna od bazy
engine_kwargs = {}
if SQLALCHEMY_DATABASE_URL.startswith("sqlite"):
    engine_kwargs["connect_args"] = {"check_same_thread": False} # Tylko dla SQLite
    # In-memory SQLite lives in a single connection, share it across threads
    if SQLALCHEMY_DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        engine_kwargs["poolclass"] = StaticPool
else:
    engine_kwargs["pool_pre_ping"] = True

engine = create_engine(SQLALCHEMY_DATABASE_URL, **engine_kwargs)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db():
    # Register every table on Base.metadata before create_all
    import models.company, models.personnel, models.supplier  # noqa: F401
    import models.order, models.stock, models.log  # noqa: F401
    Base.metadata.create_all(bind=engine)
