"""
Database engine and sessions (SQLAlchemy)

One engine per process. Request handlers get a short-lived session through
``get_db``; the dashboard fan-out opens one session per metric from
``get_session_factory()`` in worker threads.
"""
import psycopg
from sqlalchemy import create_engine, text
from sqlalchemy.orm import DeclarativeBase, sessionmaker, Session

from app.config import get_settings


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for all LifeDash tables
    """
    pass


_engine = None
_SessionLocal = None


def get_engine():
    """Get or create SQLAlchemy engine (singleton)"""
    global _engine
    if _engine is None:
        url = get_settings().get_sqlalchemy_url()
        connect_args = {}
        if url.startswith("sqlite"):
            # sessions are used from threadpool workers
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, pool_pre_ping=True, connect_args=connect_args)
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create session factory (singleton)"""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(bind=get_engine(), autoflush=False, autocommit=False)
    return _SessionLocal


def get_db() -> Session:
    """
    FastAPI dependency: one session per request, always closed

    Usage:
        @router.get("/habits/day")
        def habits_day(db: Session = Depends(get_db)):
            ...
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def check_db_connection() -> None:
    """
    Readiness check: ``SELECT 1`` against the configured database

    PostgreSQL is probed with raw psycopg (short connect timeout), anything
    else through the SQLAlchemy engine.

    Raises:
        psycopg.OperationalError / sqlalchemy.exc.OperationalError: БД недоступна
    """
    settings = get_settings()
    if settings.DATABASE_URL.startswith("postgresql"):
        with psycopg.connect(settings.DATABASE_URL, connect_timeout=3) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return
    with get_engine().connect() as conn:
        conn.execute(text("SELECT 1"))
