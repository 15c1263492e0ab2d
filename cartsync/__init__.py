"""
cartsync — storefront cart synchronization and at-most-once order submission.

Modules:
    session   — bearer token + locale, persisted
    transport — normalized JSON transport, classified errors
    cart      — server-authoritative cart view, total calculation
    orders    — order endpoints, submission coordinator

Quick start:
    from cartsync import Storefront, ClientConfig

    async with Storefront.open(ClientConfig.from_env(), store) as shop:
        await shop.cart.refresh()
        result = await shop.checkout.submit()
"""

from __future__ import annotations

from cartsync import cart, orders, session, transport
from cartsync._config import ClientConfig
from cartsync._storefront import Storefront
from cartsync._types import Result, Ok, Error

__version__ = "0.1.0"

__all__ = (
    "cart",
    "orders",
    "session",
    "transport",
    "ClientConfig",
    "Storefront",
    "Result",
    "Ok",
    "Error",
    "__version__",
)
