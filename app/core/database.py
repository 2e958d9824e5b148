"""
Database connection and session management
Uses SQLAlchemy async engine (PostgreSQL via asyncpg in production)
Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html
"""
from typing import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool


def create_engine(database_url: str) -> AsyncEngine:
    """
    Build the async engine for the given URL.

    The engine is created once per process (in the application lifespan)
    and handed to the session factory; nothing in this module holds it.
    """
    if not database_url:
        raise ValueError(
            "DATABASE_URL environment variable is not set. "
            "Please set it in your .env file."
        )

    connect_args = {}
    if database_url.startswith("postgresql+asyncpg://"):
        # asyncpg-specific connection arguments
        # Reference: https://magicstack.github.io/asyncpg/current/api/index.html#connection
        connect_args = {
            "command_timeout": 60,
            "server_settings": {
                "application_name": "store_admin_api",
            },
        }

    # NullPool: each request gets a fresh connection
    # Reference: https://docs.sqlalchemy.org/en/20/core/pooling.html#switching-pool-implementations
    return create_async_engine(
        database_url,
        echo=False,  # Set to True for SQL query logging
        poolclass=NullPool,
        connect_args=connect_args,
    )


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """
    Build the session factory bound to ``engine``.
    Reference: https://docs.sqlalchemy.org/en/20/orm/extensions/asyncio.html#session-basics
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,  # Keep objects accessible after commit
        autocommit=False,
        autoflush=False,
    )


# Base class for all database models
# Reference: https://docs.sqlalchemy.org/en/20/orm/declarative_styles.html
class Base(DeclarativeBase):
    """Base class for SQLAlchemy declarative models"""
    pass


# Dependency to get database session
# Used in FastAPI route handlers via dependency injection
# Reference: https://fastapi.tiangolo.com/tutorial/dependencies/
async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """
    Dependency function that provides a database session

    The session factory is the one created in the application lifespan
    and stored on ``app.state``:
    - Commits on success
    - Rolls back on error
    - Always closes the session
    """
    session_maker: async_sessionmaker[AsyncSession] = request.app.state.session_maker
    async with session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
