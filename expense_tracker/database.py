"""Database engine, session factory and declarative base."""
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from expense_tracker.config import settings


def build_engine(url: str) -> Engine:
    """Create an engine, sharing one connection for in-memory SQLite."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

Base = declarative_base()


def init_db() -> None:
    """Create database tables if they do not already exist."""
    from expense_tracker.users import models as user_models  # noqa: F401
    from expense_tracker.accounts.expenses import models as expense_models  # noqa: F401
    from expense_tracker.accounts.config import models as config_models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def check_connection() -> None:
    """Raise if the database cannot be reached."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
