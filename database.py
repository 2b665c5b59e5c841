# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- Database engine configuration (Azure SQL through pymssql, or any
  SQLAlchemy URL given in DATABASE_URL, e.g. sqlite for local runs)
- Session factory for dependency injection
- Connection utilities

Usage:
     from database import get_session, engine

     # In FastAPI routes:
     @router.get("/units")
     def list_units(db: Session = Depends(get_session)):
          return db.query(Unit).all()
"""
import logging
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

import config

logger = logging.getLogger("emperium.database")

DATABASE_URL = config.database_url()


def _build_engine(url: str):
     if url.startswith("sqlite"):
          # In-memory sqlite must share one connection across threads
          kwargs = {"connect_args": {"check_same_thread": False}}
          if url in ("sqlite://", "sqlite:///:memory:"):
               kwargs["poolclass"] = StaticPool
          return create_engine(url, echo=config.SQL_ECHO, **kwargs)

     return create_engine(
          url,
          poolclass=QueuePool,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          echo=config.SQL_ECHO,
     )


engine = _build_engine(DATABASE_URL)

# Session factory
SessionLocal = sessionmaker(
     bind=engine,
     autocommit=False,
     autoflush=False,
     expire_on_commit=False,
)


def get_session() -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session.

     The session is committed when the handler returns normally and
     rolled back when it raises.

     Yields:
          Session: SQLAlchemy database session
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
     """
     Context manager for database sessions (for use outside FastAPI routes).

     Usage:
          with get_session_context() as db:
               units = db.query(Unit).all()
     """
     session = SessionLocal()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()


def init_db() -> None:
     """
     Create all tables and seed the default complaint categories.

     For production, use Alembic migrations instead.
     """
     from models import Base
     from services.seed_service import seed_complaint_categories

     Base.metadata.create_all(bind=engine)
     with get_session_context() as db:
          seed_complaint_categories(db)
     logger.info("Database schema ready")
