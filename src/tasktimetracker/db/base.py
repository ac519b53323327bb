from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from ..config import StoreConfig
from ..exceptions import DatabaseError


class BookingBase(DeclarativeBase):
    """Tables of the booking store."""
    metadata = MetaData()


class TaskBase(DeclarativeBase):
    """Tables of the task store."""
    metadata = MetaData()


def create_store_engine(config: StoreConfig) -> AsyncEngine:
    """
    Creates the async engine for one SQLite store.

    pysqlite never emits BEGIN before DDL on its own, so transaction control
    is taken over here: the driver runs in autocommit mode and SQLAlchemy
    issues BEGIN itself. Migrations then roll back as a whole.
    """
    try:
        config.ensure_parent_dir()
    except OSError as e:
        raise DatabaseError(f"Cannot create the directory of store {config.path}: {e}") from e
    engine = create_async_engine(
        config.get_dsn(),
        echo=config.echo,
        connect_args={"timeout": config.timeout},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute(f"PRAGMA foreign_keys = {'ON' if config.foreign_keys else 'OFF'}")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@asynccontextmanager
async def get_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
