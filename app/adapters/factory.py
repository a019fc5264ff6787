"""Factory functions building store adapters from settings."""

from __future__ import annotations

from urllib.parse import parse_qs, urlparse

import redis

from app.adapters.cache.base import AbstractCacheStore
from app.adapters.cache.in_memory import InMemoryCacheStore
from app.adapters.cache.redis_store import RedisCacheStore
from app.adapters.db.base import AbstractUserRepository
from app.adapters.db.session import build_session_factory, create_db_engine, create_tables
from app.adapters.db.sqlalchemy_repository import SqlAlchemyUserRepository
from app.adapters.rate_limit.base import AbstractCounterStore
from app.adapters.rate_limit.in_memory import InMemoryCounterStore
from app.adapters.rate_limit.redis_counter import RedisCounterStore
from app.core.config import DatabaseSettings, RedisSettings, settings
from app.core.errors import ValidationAppError

SUPPORTED_BACKENDS = ("redis", "memory")


def _backend(redis_settings: RedisSettings) -> str:
    backend = redis_settings.backend.lower()
    if backend not in SUPPORTED_BACKENDS:
        raise ValidationAppError(
            code="unknown_store_backend",
            message=(
                f"Unknown store backend: '{backend}'. "
                f"Supported backends: {', '.join(SUPPORTED_BACKENDS)}"
            ),
            field="REDIS_BACKEND",
        )
    return backend


def _check_url_has_no_database(url: str) -> None:
    # redis-py lets a path or ?db= in the URL override the db argument
    parsed = urlparse(url)
    path_db = parsed.path.strip("/") if parsed.scheme in ("redis", "rediss") else ""
    if path_db or "db" in parse_qs(parsed.query):
        raise ValidationAppError(
            code="redis_url_has_database",
            message=(
                "REDIS_URL must not select a database; "
                "use REDIS_CACHE_DB and REDIS_STORAGE_DB instead"
            ),
            field="REDIS_URL",
        )


def create_redis_client(db: int, redis_settings: RedisSettings | None = None) -> redis.Redis:
    """Build a Redis client bound to logical database ``db``.

    The connection is opened lazily on the first command.

    Raises:
        ValidationAppError: If the URL itself names a database.
    """
    cfg = redis_settings or settings.redis
    _check_url_has_no_database(cfg.url)
    return redis.Redis.from_url(
        cfg.url,
        db=db,
        socket_timeout=cfg.timeout_seconds,
        socket_connect_timeout=cfg.timeout_seconds,
    )


def create_cache_store(redis_settings: RedisSettings | None = None) -> AbstractCacheStore:
    """Instantiate the entitlement cache store for the configured backend.

    Raises:
        ValidationAppError: If the backend name is unknown.
    """
    cfg = redis_settings or settings.redis
    if _backend(cfg) == "memory":
        return InMemoryCacheStore()
    return RedisCacheStore(create_redis_client(cfg.cache_db, cfg))


def create_counter_store(redis_settings: RedisSettings | None = None) -> AbstractCounterStore:
    """Instantiate the counter store for the configured backend.

    Raises:
        ValidationAppError: If the backend name is unknown.
    """
    cfg = redis_settings or settings.redis
    if _backend(cfg) == "memory":
        return InMemoryCounterStore()
    return RedisCounterStore(create_redis_client(cfg.storage_db, cfg))


def create_user_repository(db_settings: DatabaseSettings | None = None) -> AbstractUserRepository:
    """Build the SQLAlchemy repository, creating tables when DB_AUTO_CREATE is set."""
    cfg = db_settings or settings.db
    engine = create_db_engine(cfg)
    if cfg.auto_create:
        create_tables(engine)
    return SqlAlchemyUserRepository(build_session_factory(engine))
