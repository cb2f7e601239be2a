"""Database engine and session management with connection pooling"""

import logging
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session

from finance_api.domain.exceptions import StorageError
from finance_api.infrastructure.database.models import Base

logger = logging.getLogger(__name__)


def create_db_engine(database_url: str) -> Engine:
    """Build an engine; SQLite gets a thread-shareable connection instead of a sized pool"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def verify_connection(engine: Engine) -> None:
    """Fail fast when the database is unreachable

    Raises:
        StorageError: connection or trivial query failed
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise StorageError(f"Database unavailable: {e}") from e


def init_database(engine: Engine, create_tables: bool = True) -> None:
    verify_connection(engine)
    if create_tables:
        Base.metadata.create_all(bind=engine)
        logger.info("Database schema ensured", extra={"step": "startup"})


def get_db(request: Request) -> Generator[Session, None, None]:
    """Dependency injection for database sessions bound to the app's engine"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
