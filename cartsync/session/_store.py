"""
Session store — persisted key/value protocol.

All methods return Result for explicit error handling.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

from kungfu import Result, Ok


TOKEN_KEY = "auth_token"
LANG_KEY = "language"


# ═══════════════════════════════════════════════════════════════════════════════
# Store Error
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class StoreError:
    """Storage operation error."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Store Protocol — Result-based
# ═══════════════════════════════════════════════════════════════════════════════


class Store(Protocol):
    """
    Session key/value store protocol.

    Holds the bearer token and the active locale between runs.

    Example — file-backed implementation:

        class JsonFileStore:
            def __init__(self, path: Path) -> None:
                self.path = path

            async def get(self, key: str) -> Result[str | None, StoreError]:
                try:
                    data = json.loads(self.path.read_text()) if self.path.exists() else {}
                    return Ok(data.get(key))
                except (OSError, ValueError) as e:
                    return Error(StoreError("Failed to read", e))

            # ... set / delete
    """

    async def get(self, key: str) -> Result[str | None, StoreError]:
        """Get value. Returns Ok(None) if not found."""
        ...

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        """Insert or overwrite value."""
        ...

    async def delete(self, key: str) -> Result[bool, StoreError]:
        """Delete value. Returns Ok(True) if existed."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Store — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryStore:
    """
    In-memory session store.

    Note: single process only, data does not survive a restart.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> Result[str | None, StoreError]:
        async with self._lock:
            return Ok(self._values.get(key))

    async def set(self, key: str, value: str) -> Result[None, StoreError]:
        async with self._lock:
            self._values[key] = value
            return Ok(None)

    async def delete(self, key: str) -> Result[bool, StoreError]:
        async with self._lock:
            return Ok(self._values.pop(key, None) is not None)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "TOKEN_KEY",
    "LANG_KEY",
    "StoreError",
    "Store",
    "MemoryStore",
)
