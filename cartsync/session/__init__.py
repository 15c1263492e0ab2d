"""
Session — bearer token and locale, persisted across runs.

    from cartsync import session as Sess

    store, engine = await Sess.create_sqlite_store("sqlite+aiosqlite:///session.db")
    ctx = await Sess.SessionContext.load(store)
    await ctx.set_token(token)
    ctx.lang  # "ar" unless chosen otherwise
"""

from __future__ import annotations

from cartsync.session._store import (
    TOKEN_KEY,
    LANG_KEY,
    Store,
    StoreError,
    MemoryStore,
)
from cartsync.session._sqlalchemy import (
    SessionValueTable,
    SQLAlchemyStore,
    create_sqlite_store,
)
from cartsync.session._context import SessionContext

__all__ = (
    "TOKEN_KEY",
    "LANG_KEY",
    "Store",
    "StoreError",
    "MemoryStore",
    "SessionValueTable",
    "SQLAlchemyStore",
    "create_sqlite_store",
    "SessionContext",
)
