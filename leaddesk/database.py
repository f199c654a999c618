"""
Database engine + session factory.

Always initializes: defaults to SQLite for local dev, Postgres in production.
get_session() always returns a real session.
"""
import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from leaddesk.config import DATABASE_URL


class Base(DeclarativeBase):
    pass


def new_id():
    """Primary keys are UUID strings so they survive the client's temp-id swap."""
    return str(uuid.uuid4())


# Hosting platforms inject postgres:// but SQLAlchemy 2.x requires postgresql://
url = DATABASE_URL.replace('postgres://', 'postgresql://', 1)

# SQLite needs different engine kwargs than Postgres
if url.startswith('sqlite'):
    engine = create_engine(url, connect_args={'check_same_thread': False})
else:
    engine = create_engine(url, pool_pre_ping=True, pool_size=5, max_overflow=10)

SessionLocal = sessionmaker(bind=engine, expire_on_commit=False)


def get_session():
    """Return a new DB session."""
    return SessionLocal()


def isoformat(value):
    """Serialize an optional datetime for JSON responses."""
    return value.isoformat() if value is not None else None
