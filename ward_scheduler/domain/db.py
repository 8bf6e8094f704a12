"""Database initialization and utilities."""

from __future__ import annotations

from typing import Dict

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

DEFAULT_DB_URL = "sqlite:///ward_scheduler.db"

# Shared per database URL for the life of the process
_engines: Dict[str, Engine] = {}
_session_factories: Dict[str, sessionmaker] = {}


def create_db_engine(db_url: str = DEFAULT_DB_URL, echo: bool = False) -> Engine:
    """Create SQLAlchemy engine."""
    return create_engine(db_url, echo=echo)


def get_engine(db_url: str = DEFAULT_DB_URL) -> Engine:
    """Engine for ``db_url``, created on first use."""
    if db_url not in _engines:
        _engines[db_url] = create_db_engine(db_url)
    return _engines[db_url]


def init_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Initialize database and create all tables."""
    Base.metadata.create_all(get_engine(db_url))
    print(f"[INFO] Database initialized: {db_url}")


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    """Get a new database session on the shared engine for ``db_url``."""
    if db_url not in _session_factories:
        _session_factories[db_url] = sessionmaker(bind=get_engine(db_url))
    return _session_factories[db_url]()
