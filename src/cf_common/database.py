"""Async SQLAlchemy engine, session factory and FastAPI session dependency.

One AsyncSession per request. The balance engine issues its two reads (latest
inventory, movements since) on that session without opening an explicit
transaction. Ledger writes commit or roll back in LedgerApplicationService,
never here, so a request that only reads a balance never commits anything.

The schema itself is owned by the raw-SQL Alembic migrations; ``Base`` only
carries the ORM mirrors in cf_ledger/infrastructure/db_models.py.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings


class Base(DeclarativeBase):
    """Declarative base for coffres, members, movements and inventories."""

    pass


# idle pooled connections are checked before use
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=20,
    max_overflow=10,
    pool_pre_ping=True,
)

# rows stay readable after commit; services build responses from them
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, closed (and any open
    transaction rolled back) when the request ends."""
    async with async_session_factory() as session:
        yield session
