"""
Cart — server-authoritative cart view and total calculation.

    from cartsync import cart as C

    sync = C.CartSynchronizer(C.CartApi(transport), session, config)
    await sync.refresh()
    await sync.add_line(product_id=7, quantity=2)

    totals = C.compute_totals(raw_snapshot)   # works on any payload shape
"""

from __future__ import annotations

from cartsync.cart._totals import (
    Totals,
    DEFAULT_SHIPPING,
    parse_amount,
    first_amount,
    line_amount,
    line_quantity,
    lines_subtotal,
    compute_totals,
)
from cartsync.cart._types import (
    CartLine,
    DiscountRule,
    Coupon,
    Cart,
    CartErrorKind,
    CartError,
)
from cartsync.cart._api import CartApi
from cartsync.cart._sync import CartSynchronizer, UnauthenticatedHook

__all__ = (
    # Totals
    "Totals",
    "DEFAULT_SHIPPING",
    "parse_amount",
    "first_amount",
    "line_amount",
    "line_quantity",
    "lines_subtotal",
    "compute_totals",
    # Types
    "CartLine",
    "DiscountRule",
    "Coupon",
    "Cart",
    "CartErrorKind",
    "CartError",
    # Sync
    "CartApi",
    "CartSynchronizer",
    "UnauthenticatedHook",
)
