"""Database engine, sessions and schema setup"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from gaston_budget.config import settings
from gaston_budget.infrastructure.database.models import Base


def _engine_options(url: str) -> dict:
    # SQLite is file based: no pool sizing, and sessions cross request threads
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 10,
        "pool_recycle": 3600,
    }


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Create the entity and document tables if they are missing"""
    Base.metadata.create_all(bind=bind)


def get_db() -> Session:
    """Request-scoped session; uncommitted writes are rolled back on close"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
