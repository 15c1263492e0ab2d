"""
SQLAlchemy integration — persisted session store.

Usage:
    store, engine = await create_sqlite_store("sqlite+aiosqlite:///session.db")
    session = await SessionContext.load(store)
    ...
    await engine.dispose()

Or bring your own session factory (the table must exist):

    store = SQLAlchemyStore(async_sessionmaker(engine, expire_on_commit=False))
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Text, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from kungfu import Result, Ok, Error

from cartsync.session._store import StoreError


# ═══════════════════════════════════════════════════════════════════════════════
# Table
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class SessionValueTable(Base):
    """One row per persisted session key (token, language)."""

    __tablename__ = "cartsync_session_values"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Store
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyStore:
    """
    Session store backed by any async SQLAlchemy engine.

    Note: every call opens its own short session. Writes are rare
    (login/logout/language switch), reads happen once at session start.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session = session_factory

    async def get(self, key: str) -> Result[str | None, StoreError]:
        try:
            async with self._session() as session:
                row = await session.get(SessionValueTable, key)
                return Ok(row.value if row is not None else None)
        except SQLAlchemyError as e:
            return Error(StoreError(f"Failed to read {key!r}", e))

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        try:
            async with self._session() as session, session.begin():
                await session.merge(SessionValueTable(key=key, value=value, updated_at=datetime.now()))
            return Ok(None)
        except SQLAlchemyError as e:
            return Error(StoreError(f"Failed to write {key!r}", e))

    async def delete(self, key: str) -> Result[bool, StoreError]:
        try:
            async with self._session() as session, session.begin():
                result = await session.execute(delete(SessionValueTable).where(SessionValueTable.key == key))
            return Ok((result.rowcount or 0) > 0)  # type: ignore[attr-defined]
        except SQLAlchemyError as e:
            return Error(StoreError(f"Failed to delete {key!r}", e))


async def create_sqlite_store(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[SQLAlchemyStore, AsyncEngine]:
    """Create the session table and return (store, engine)."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return SQLAlchemyStore(async_sessionmaker(engine, expire_on_commit=False)), engine


__all__ = (
    "SessionValueTable",
    "SQLAlchemyStore",
    "create_sqlite_store",
)
