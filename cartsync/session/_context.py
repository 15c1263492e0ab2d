"""
Session context — token and locale for one storefront session.

Passed explicitly into the transport; reads are synchronous, writes go
through to the backing store.
"""

from __future__ import annotations

import structlog
from kungfu import Result, Ok, Error

from cartsync._config import DEFAULT_LANG, SUPPORTED_LANGS
from cartsync.session._store import LANG_KEY, TOKEN_KEY, MemoryStore, Store, StoreError

logger = structlog.get_logger(__name__)


class SessionContext:
    """
    Bearer token + active language.

    Note: no client-side expiry. A 401 from the backend is the only signal
    that the token is stale; the owner then calls clear_token().
    """

    def __init__(
        self,
        store: Store,
        *,
        token: str | None = None,
        lang: str | None = None,
        default_lang: str = DEFAULT_LANG,
    ) -> None:
        self._store = store
        self._token = token
        self._lang = lang
        self._default_lang = default_lang

    @classmethod
    async def load(cls, store: Store | None = None, *, default_lang: str = DEFAULT_LANG) -> SessionContext:
        """
        Start a session from persisted state.

        A store read failure starts an anonymous session in the default
        locale rather than failing.
        """
        store = store if store is not None else MemoryStore()
        token = await _read(store, TOKEN_KEY)
        lang = await _read(store, LANG_KEY)
        if lang is not None and lang not in SUPPORTED_LANGS:
            lang = None
        return cls(store, token=token or None, lang=lang, default_lang=default_lang)

    # ── Reads ─────────────────────────────────────────────────────────

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def lang(self) -> str:
        """Active locale, default locale when unset."""
        return self._lang or self._default_lang

    # ── Writes ────────────────────────────────────────────────────────

    async def set_token(self, token: str) -> Result[None, StoreError]:
        if not token:
            raise ValueError("token must be a non-empty string")
        self._token = token
        return await self._store.set(TOKEN_KEY, token)

    async def clear_token(self) -> Result[None, StoreError]:
        self._token = None
        match await self._store.delete(TOKEN_KEY):
            case Ok(_):
                return Ok(None)
            case Error(e):
                return Error(e)

    async def set_lang(self, lang: str) -> Result[None, StoreError]:
        if lang not in SUPPORTED_LANGS:
            raise ValueError(f"Unsupported language {lang!r}. Expected one of {sorted(SUPPORTED_LANGS)}.")
        self._lang = lang
        return await self._store.set(LANG_KEY, lang)


async def _read(store: Store, key: str) -> str | None:
    match await store.get(key):
        case Ok(value):
            return value
        case Error(e):
            logger.warning("Session store read failed", key=key, error=e.message)
            return None


__all__ = ("SessionContext",)
