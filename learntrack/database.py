"""Database configuration and session management for the local keyed store."""

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from learntrack.config import Settings


class Base(DeclarativeBase):
    """Base class for all database models."""


def create_store_engine(database_url: str) -> Engine:
    """Create the engine backing the keyed store."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(settings: Settings) -> sessionmaker[Session]:
    """Create the engine, make sure tables exist and return a session factory."""
    from learntrack import models  # noqa: F401, PLC0415

    engine = create_store_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """Provide a session that is always closed afterwards."""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
