from __future__ import annotations

from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from pkgvalidation.config import AppConfiguration

from .models import Base

DEFAULT_DB_NAME = "pkgvalidation.db"


def resolve_db_path(db_path: Optional[Path | str] = None) -> Path:
    """Explicit path if given, else ``pkgvalidation.db`` in the current working directory."""
    return Path(db_path) if db_path else Path.cwd() / DEFAULT_DB_NAME


def get_engine(db_path: Optional[Path | str] = None) -> Engine:
    return create_engine(
        f"sqlite+pysqlite:///{resolve_db_path(db_path)}", future=True, echo=False
    )


def create_db(engine: Optional[Engine] = None) -> Engine:
    """Create tables if they do not exist and return the engine."""
    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    return engine


def open_store(config: AppConfiguration) -> Engine:
    """Engine for the configured database, with the schema in place."""
    return create_db(get_engine(config.database_path))


def get_session(engine: Optional[Engine] = None) -> Session:
    """Return a new session bound to the given or default engine.

    Autoflush stays off so that pending status changes are only written when
    the owner of the session commits.
    """
    engine = engine or get_engine()
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    return SessionLocal()
