"""
sculpo.infra.database.engine – async SQLAlchemy 2.0 engine and session factory.

One engine per process, built lazily from PostgresConfig (env when omitted) and
released by close_engine() during app shutdown.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Registers every model on Base.metadata before create_all()
import sculpo.infra.database.models  # noqa: F401
from sculpo.infra.database.models.base import Base

if TYPE_CHECKING:
    from sculpo.config import PostgresConfig

logger = logging.getLogger(__name__)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker[AsyncSession]] = None


def _pool_options(config: "PostgresConfig", use_null_pool: bool) -> dict[str, Any]:
    if use_null_pool:
        return {"poolclass": NullPool}
    return {
        "pool_size": config.pool_size,
        "max_overflow": config.max_overflow,
        "pool_timeout": config.pool_timeout,
        "pool_recycle": config.pool_recycle,
        "pool_pre_ping": True,
    }


def build_engine(
    config: Optional["PostgresConfig"] = None,
    *,
    use_null_pool: bool = False,
) -> AsyncEngine:
    """Return the process-wide engine, creating it on first call. NullPool suits tests and scripts."""
    global _engine
    if _engine is None:
        if config is None:
            from sculpo.config import load_postgres_config
            config = load_postgres_config()
        _engine = create_async_engine(
            config.async_url,
            echo=config.echo,
            connect_args={"server_settings": {"application_name": config.application_name}},
            **_pool_options(config, use_null_pool),
        )
        logger.info(
            "Scheduling store engine ready (null_pool=%s pool_size=%d recycle=%ds)",
            use_null_pool, config.pool_size, config.pool_recycle,
        )
    return _engine


def build_session_factory(engine: Optional[AsyncEngine] = None) -> async_sessionmaker[AsyncSession]:
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            engine or build_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def init_db(engine: Optional[AsyncEngine] = None, *, drop_all: bool = False) -> None:
    """Create the scheduling tables. Dev/test only; deployed schemas are migrated."""
    target = engine or build_engine()
    async with target.begin() as conn:
        if drop_all:
            logger.warning("Recreating scheduling tables from scratch")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Scheduling tables ensured: %s", ", ".join(sorted(Base.metadata.tables)))


async def close_engine() -> None:
    global _engine, _session_factory
    engine, _engine, _session_factory = _engine, None, None
    if engine is not None:
        await engine.dispose()
        logger.info("Scheduling store engine disposed")
