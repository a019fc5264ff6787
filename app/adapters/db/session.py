"""Engine and session factory construction.

PostgreSQL (psycopg) is the production target and gets a sized connection
pool. SQLite URLs are accepted for local runs and tests; an in-memory SQLite
database is shared across threads through a single static connection.
"""

from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.adapters.db.models import Base
from app.core.config import DatabaseSettings, settings

logger = logging.getLogger(__name__)


def create_db_engine(db_settings: DatabaseSettings | None = None) -> Engine:
    """Create an engine from settings.

    Args:
        db_settings: Database settings; defaults to the global settings.

    Returns:
        Configured SQLAlchemy engine (no connection is opened yet).
    """
    cfg = db_settings or settings.db
    url = make_url(cfg.url)

    if url.get_backend_name() == "sqlite":
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
    else:
        engine = create_engine(
            url,
            pool_size=cfg.pool_size,
            max_overflow=cfg.max_overflow,
            pool_timeout=cfg.pool_timeout_seconds,
            pool_recycle=cfg.pool_recycle_seconds,
            pool_pre_ping=True,
        )

    logger.info(
        "db.engine_created",
        extra={"backend": url.get_backend_name(), "database": url.database},
    )
    return engine


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def create_tables(engine: Engine) -> None:
    """Create any missing tables (no migrations)."""
    Base.metadata.create_all(engine)
