"""Async database engine for the game and course tables.

Nothing connects at import time: tests and scripts set ``DATABASE_URL`` first
and the engine is built on the first call to :func:`get_engine`.
"""

import os
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import NullPool, StaticPool


engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[sessionmaker] = None
Base = declarative_base()


def _async_url(url: str) -> str:
    if url.startswith("postgresql://"):
        return "postgresql+asyncpg://" + url[len("postgresql://"):]
    return url


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite+aiosqlite://"):
        return {"echo": False, "pool_pre_ping": True}
    # :memory: lives on one connection, so every session must share it.
    pool = StaticPool if ":memory:" in url else NullPool
    return {"echo": False, "poolclass": pool}


def get_engine() -> AsyncEngine:
    global engine, AsyncSessionLocal

    if engine is None:
        raw_url = os.getenv("DATABASE_URL")
        if not raw_url:
            raise RuntimeError("DATABASE_URL environment variable is required")
        url = _async_url(raw_url)
        engine = create_async_engine(url, **_engine_options(url))
        AsyncSessionLocal = sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )

    return engine


def get_session_factory() -> sessionmaker:
    """Session factory bound to :func:`get_engine`."""

    if AsyncSessionLocal is None:
        get_engine()

    assert AsyncSessionLocal is not None
    return AsyncSessionLocal
