from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings


engine = create_async_engine(settings.database_url, pool_pre_ping=True)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_db() -> AsyncIterator[AsyncSession]:
    async with SessionLocal() as session:
        yield session


@asynccontextmanager
async def session_scope(database_url: str | None = None) -> AsyncIterator[AsyncSession]:
    """
    Scoped session for one-shot scripts.

    Builds its own engine (never the module-level one) and disposes it on
    every exit path, including when the body raises.
    """
    own_engine = create_async_engine(database_url or settings.database_url, pool_pre_ping=True)
    Session = async_sessionmaker(own_engine, expire_on_commit=False, class_=AsyncSession)
    try:
        async with Session() as db:
            yield db
    finally:
        await own_engine.dispose()
