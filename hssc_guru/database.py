"""Engine, session factory and declarative base."""
from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from hssc_guru.config import DATABASE_URL, DB_TIMEOUT_SECONDS


def _connect_args(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    # timer ticks and request handlers share one connection pool across threads
    return {"check_same_thread": False, "timeout": DB_TIMEOUT_SECONDS}


engine = create_engine(DATABASE_URL, connect_args=_connect_args(DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False)


class Base(DeclarativeBase):
    pass


def get_db():
    """Request-scoped database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create any missing tables."""
    import hssc_guru.models.db  # noqa: F401  registers the mappers

    Base.metadata.create_all(bind=engine)
