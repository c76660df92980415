"""
SQLAlchemy async engine and session management

This module provides:
1. AsyncEngineManager: event-loop-aware engine/session maker cache
2. Base: declarative base for every ORM model
3. Database: session provider injected through the DI container

SQLite (aiosqlite) is supported for local runs and tests. Its connections are
switched to ``BEGIN IMMEDIATE`` so concurrent writers serialize on the database
lock instead of failing on upgrade from a shared lock.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


def is_sqlite_url(url: str) -> bool:
    return make_url(url).get_backend_name() == 'sqlite'


def configure_sqlite_engine(engine: AsyncEngine) -> AsyncEngine:
    """Hand transaction control to SQLAlchemy and open write-locking transactions."""

    @event.listens_for(engine.sync_engine, 'connect')
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()

    @event.listens_for(engine.sync_engine, 'begin')
    def _on_begin(conn: Any) -> None:
        conn.exec_driver_sql('BEGIN IMMEDIATE')

    return engine


def build_engine(url: str) -> AsyncEngine:
    if is_sqlite_url(url):
        return configure_sqlite_engine(
            create_async_engine(url, echo=False, connect_args={'timeout': 30})
        )
    return create_async_engine(
        url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_POOL_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=settings.DB_POOL_PRE_PING,
    )


# =============================================================================
# Event-loop-aware Engine Manager
# =============================================================================


class AsyncEngineManager:
    """
    Caches one engine per running event loop.

    Pooled asyncpg connections are bound to the loop that created them, so a
    new loop (test runner, reminder job) gets a fresh engine instead of
    "Future attached to a different loop" errors.
    """

    def __init__(self, url: Optional[str] = None) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url or settings.DATABASE_URL_ASYNC

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = build_engine(self.url)
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, replacing engine...')
                self._session_maker = None
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = build_engine(self.url)
            self._loop = current_loop

        return self._engine

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None or self._session_maker.kw.get('bind') is not engine:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._loop = None
        self._session_maker = None


_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


def get_session_maker() -> async_sessionmaker[AsyncSession]:
    return _engine_manager.get_session_maker()


async def dispose_engine() -> None:
    await _engine_manager.dispose()


# =============================================================================
# Base Model
# =============================================================================


class Base(DeclarativeBase):
    pass


async def create_db_and_tables(engine: Optional[AsyncEngine] = None) -> None:
    """Create tables from model metadata (local runs and tests; production uses alembic)"""
    # registers every model on Base.metadata
    import src.service.lab_booking.driven_adapter.model  # noqa: F401

    current_engine = engine or get_engine()
    async with current_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)


# =============================================================================
# Database Class (for DI)
# =============================================================================


class Database:
    """Session provider; ``session`` is handed to the unit of work as its factory."""

    def __init__(self, *, engine_manager: Optional[AsyncEngineManager] = None) -> None:
        self._engine_manager = engine_manager or _engine_manager

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session
