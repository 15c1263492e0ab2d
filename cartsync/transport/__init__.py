"""
Transport — normalized HTTP/JSON access to the storefront backend.

    from cartsync import transport as T

    async with T.Transport(session, config) as t:
        result = await t.get("/orders/42")
        match result:
            case Ok(payload): ...
            case Error(T.ClassifiedError(kind=T.ErrorKind.UNAUTHENTICATED)): ...
"""

from __future__ import annotations

from cartsync.transport._errors import (
    ErrorKind,
    ClassifiedError,
    kind_for_status,
)
from cartsync.transport._client import Transport, Sleep

__all__ = (
    "ErrorKind",
    "ClassifiedError",
    "kind_for_status",
    "Transport",
    "Sleep",
)
