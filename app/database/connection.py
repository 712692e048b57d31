# app/database/connection.py
"""
Database handle
The engine and session factory are built in the application lifespan and
kept on app.state; request handlers receive a session through get_db.
"""
import logging
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE clauses unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(
    database_url: str,
    pool_size: int = 20,
    max_overflow: int = 0,
    pool_timeout: float = 2.0,
    pool_recycle: int = 30,
    echo: bool = False,
) -> AsyncEngine:
    """Create the async engine with a bounded connection pool."""
    if database_url.startswith("sqlite"):
        engine = create_async_engine(database_url, echo=echo)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    else:
        engine = create_async_engine(
            database_url,
            echo=echo,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_recycle=pool_recycle,
            pool_pre_ping=True,
        )
    logger.info(f"✅ Database engine ready ({engine.url.get_backend_name()})")
    return engine


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


async def init_models(engine: AsyncEngine) -> None:
    """Create every table registered on Base."""
    # Import models so they are registered on the metadata
    from app.users.user_models.user_model import User  # noqa: F401
    from app.system_models.patient_model.patient_model import Patient  # noqa: F401
    from app.system_models.chat_message_model.chat_message_model import ChatMessage  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("✅ Database tables created")


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Yield one session per request from the factory stored on app.state.
    The session is closed (and its connection returned to the pool) afterwards.
    """
    session_factory: Optional[async_sessionmaker[AsyncSession]] = getattr(
        request.app.state, "session_factory", None
    )
    if session_factory is None:
        raise RuntimeError("Database session factory not initialized")

    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
