"""
Core types for cartsync.

Re-exports from kungfu + JSON payload aliases shared by every layer.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Payload Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Payload = dict[str, Any]
"""Decoded JSON object returned by the backend."""

type RawMapping = Mapping[str, Any]
"""Read-only view over a payload of uncertain shape."""

type Query = Mapping[str, object]
"""Query parameters; None values are dropped before sending."""


def as_mapping(value: object) -> RawMapping | None:
    """Return value if it is a JSON object, else None."""
    if isinstance(value, Mapping):
        return value
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Payload aliases
    "Payload",
    "RawMapping",
    "Query",
    "as_mapping",
)
