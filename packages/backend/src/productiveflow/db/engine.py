"""Async SQLAlchemy engine handle and per-request sessions.

The engine is owned by a Database object that create_app() stores on
app.state. It is created lazily on first acquire(), reference-counted
across acquirers (the app lifespan, CLI commands), and disposed when the
last holder calls shutdown(). Nothing caches a client in module globals,
so reloads and tests each get their own pool.
"""

import asyncio
from typing import AsyncIterator, Optional

import structlog
from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

logger = structlog.get_logger()


class Database:
    """Lazily-initialized, reference-counted engine + session factory."""

    def __init__(self, url: str, echo: bool = False, **engine_kwargs):
        self.url = url
        self.echo = echo
        self.engine_kwargs = engine_kwargs
        self._engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self._refs = 0
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not acquired. Call acquire() first.")
        return self._engine

    @property
    def refs(self) -> int:
        return self._refs

    async def acquire(self) -> AsyncEngine:
        """Take a reference, creating the engine on first use."""
        async with self._lock:
            if self._engine is None:
                kwargs = dict(self.engine_kwargs)
                if self.url.startswith("postgresql"):
                    kwargs.setdefault("pool_size", 5)
                    kwargs.setdefault("max_overflow", 15)
                self._engine = create_async_engine(self.url, echo=self.echo, **kwargs)
                self._session_factory = async_sessionmaker(
                    self._engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                )
                logger.info("db.engine_created", dialect=self._engine.dialect.name)
            self._refs += 1
            return self._engine

    async def shutdown(self) -> None:
        """Drop a reference; dispose the pool when none remain."""
        async with self._lock:
            if self._refs == 0:
                return
            self._refs -= 1
            if self._refs == 0 and self._engine is not None:
                await self._engine.dispose()
                self._engine = None
                self._session_factory = None
                logger.info("db.engine_disposed")

    def session(self) -> AsyncSession:
        if self._session_factory is None:
            raise RuntimeError("Database not acquired. Call acquire() first.")
        return self._session_factory()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: yields a session per request, auto-closes."""
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
        finally:
            await session.close()
