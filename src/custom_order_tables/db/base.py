"""Database configuration and setup."""

from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from custom_order_tables.config.settings import settings

Base = declarative_base()


def init_db(database_url: Optional[str] = None) -> None:
    """Initialize database and create tables."""
    # Import models so every table is registered on Base.metadata
    from custom_order_tables.db import models  # noqa: F401

    engine = get_engine(database_url)
    Base.metadata.create_all(bind=engine)
    engine.dispose()


def get_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Create engine, defaulting to DATABASE_URL and DATABASE_ECHO."""
    return create_engine(
        database_url or settings.database_url,
        echo=settings.database_echo if echo is None else echo,
        pool_pre_ping=True,
    )


def get_session_factory(engine: Optional[Engine] = None) -> sessionmaker:
    """Create session factory."""
    return sessionmaker(
        engine or get_engine(),
        class_=Session,
        expire_on_commit=True,
    )
