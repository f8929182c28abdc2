# nfclink/db/session.py
"""
Async database session management for SQLAlchemy.

The engine is not a module global. It is built from Settings during the
application lifespan and stored on ``app.state``; every request gets its
own AsyncSession through ``get_db``.

Production considerations:
- Uses asyncpg for PostgreSQL
- Uses aiosqlite for SQLite (local development / tests)
- Pool pre-ping enabled to detect stale connections
"""
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import AsyncAdaptedQueuePool, NullPool

from nfclink.core.config import Settings
from nfclink.core.errors import StoreNotConfigured


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    """
    Create and configure the async SQLAlchemy engine.

    SQLite (local development):
    - NullPool, check_same_thread=False for async compatibility

    PostgreSQL (production):
    - pool_size=5, max_overflow=10
    - pool_pre_ping=True: validate connections before use
    - pool_recycle=300: hosted databases may close idle connections

    Raises:
        StoreNotConfigured: DATABASE_URL / DATABASE_KEY are missing
    """
    if not settings.store_configured:
        raise StoreNotConfigured("DATABASE_URL and DATABASE_KEY must be set")

    if settings.is_sqlite:
        return create_async_engine(
            settings.database_dsn,
            echo=settings.DATABASE_ECHO,
            poolclass=NullPool,
            connect_args={"check_same_thread": False},
        )

    return create_async_engine(
        settings.database_dsn,
        echo=settings.DATABASE_ECHO,
        poolclass=AsyncAdaptedQueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,
        pool_recycle=300,
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False: attributes stay readable after commit
    # autoflush=False: explicit flush control
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency generator for database sessions.

    Usage in FastAPI endpoints:
        @router.get("/cards")
        async def list_cards(db: AsyncSession = Depends(get_db)):
            ...

    This does NOT auto-commit. Endpoints and services commit explicitly.

    Raises:
        StoreNotConfigured: no session factory was built at startup
    """
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise StoreNotConfigured("record store is not configured")

    async with session_factory() as session:
        yield session
