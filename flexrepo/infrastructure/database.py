"""Async SQLAlchemy engine, session factory, session dependency and snapshot scope."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from flexrepo.domain.exceptions import InvalidArgument

logger = logging.getLogger(__name__)

# Store failures are never wrapped: whatever the driver or ORM raises reaches
# the caller as-is.  This alias names that category for except clauses.
StoreFailure = SQLAlchemyError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="FLEXREPO_", extra="ignore")

    database_url: str = "postgresql+asyncpg://localhost:5432/flexrepo"
    echo: bool = False
    pool_pre_ping: bool = True
    snapshot_isolation_level: str = "REPEATABLE READ"


def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(
        settings.database_url,
        echo=settings.echo,
        pool_pre_ping=settings.pool_pre_ping,
    )


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
    )


settings = Settings()

engine = build_engine(settings)

AsyncSessionLocal = build_session_factory(engine)


class Base(DeclarativeBase):
    """Shared declarative base for callers' ORM models."""


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI-style dependency that yields a session.

    Transactions begin lazily on first use; committing is left to the
    repository caller (Repository.commit or persist_now=True).
    """
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def snapshot_scope(
    session: AsyncSession,
    isolation_level: str | None = None,
) -> AsyncIterator[AsyncSession]:
    """Run a block of reads and writes inside one isolated transaction.

    Wrap Paginator.paginate / get_paginated in this scope when the count and
    the page fetch must observe the same snapshot.  The transaction commits
    when the block exits normally and rolls back on any exception.

        async with snapshot_scope(session):
            page = await repo.get_paginated(2, 25, options)
    """
    if session.in_transaction():
        raise InvalidArgument(
            "session", "snapshot_scope needs a session with no transaction in progress"
        )
    level = isolation_level or settings.snapshot_isolation_level
    async with session.begin():
        await session.connection(execution_options={"isolation_level": level})
        logger.debug("Opened snapshot transaction at isolation level %s", level)
        yield session
