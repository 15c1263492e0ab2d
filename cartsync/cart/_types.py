"""
Cart types — immutable snapshot parsed from a server payload.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any

from cartsync._types import RawMapping, as_mapping
from cartsync.cart._totals import (
    DEFAULT_SHIPPING,
    ZERO,
    Totals,
    compute_totals,
    first_amount,
    line_amount,
    line_quantity,
    parse_amount,
)
from cartsync.transport import ClassifiedError


# ═══════════════════════════════════════════════════════════════════════════════
# CartLine
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartLine:
    product_id: int | str
    name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal

    @classmethod
    def from_payload(cls, raw: object) -> CartLine | None:
        """Parse one line; None when it has no product or no positive quantity."""
        data = as_mapping(raw)
        if data is None:
            return None

        quantity = line_quantity(data)
        if quantity is None:
            return None

        product = as_mapping(data.get("product")) or {}
        product_id = data.get("product_id", product.get("id"))

        unit_price = first_amount((data.get("unit_price"), data.get("price"), product.get("price")))
        unit_price = unit_price if unit_price is not None else ZERO

        total = line_amount(data)
        return cls(
            product_id=product_id,
            name=str(product.get("name") or data.get("name") or ""),
            unit_price=unit_price,
            quantity=quantity,
            line_total=total if total is not None else unit_price * quantity,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Coupon
# ═══════════════════════════════════════════════════════════════════════════════


class DiscountRule(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Coupon:
    code: str
    rule: DiscountRule
    value: Decimal | None
    discount_amount: Decimal

    @classmethod
    def from_payload(cls, raw: object) -> Coupon | None:
        """Accept ``{"code": ..., "type": ..., ...}`` or a bare code string."""
        if isinstance(raw, str):
            return cls(raw, DiscountRule.UNKNOWN, None, ZERO) if raw.strip() else None

        data = as_mapping(raw)
        if data is None:
            return None

        code = data.get("code") or data.get("coupon_code")
        if not isinstance(code, str) or not code.strip():
            return None

        try:
            rule = DiscountRule(str(data.get("type", "")).lower())
        except ValueError:
            rule = DiscountRule.UNKNOWN

        discount = first_amount((data.get("discount_amount"), data.get("discount")))
        return cls(
            code=code,
            rule=rule,
            value=parse_amount(data.get("value")),
            discount_amount=discount if discount is not None else ZERO,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Cart:
    """
    Server-authoritative cart snapshot.

    Note: raw keeps the payload as received; totals are always derived from
    it, so a missing server total is recomputed instead of read as zero.
    """

    lines: tuple[CartLine, ...]
    items_count: int
    totals: Totals
    currency: str
    coupon: Coupon | None = None
    raw: RawMapping = field(default_factory=dict, repr=False)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def total(self) -> Decimal:
        return self.totals.total

    @classmethod
    def empty(cls, *, currency: str = "EGP", default_shipping: Decimal = DEFAULT_SHIPPING) -> Cart:
        return cls(
            lines=(),
            items_count=0,
            totals=compute_totals({"items": []}, default_shipping=default_shipping),
            currency=currency,
        )

    @classmethod
    def from_payload(
        cls,
        payload: RawMapping,
        *,
        envelope: RawMapping | None = None,
        currency: str = "EGP",
        default_shipping: Decimal = DEFAULT_SHIPPING,
    ) -> Cart:
        """
        Parse a cart object.

        envelope is the ``data`` object the cart was nested in, when it was
        nested; coupons are sometimes reported beside the cart.
        """
        items: Any = payload.get("items")
        raw_lines = items if isinstance(items, list) else []
        lines = tuple(line for line in map(CartLine.from_payload, raw_lines) if line is not None)

        count = parse_amount(payload.get("items_count"))
        items_count = int(count) if count is not None else sum(line.quantity for line in lines)

        coupon = Coupon.from_payload(payload.get("coupon") or payload.get("coupon_code"))
        if coupon is None and envelope is not None:
            coupon = Coupon.from_payload(envelope.get("coupon"))

        return cls(
            lines=lines,
            items_count=items_count,
            totals=compute_totals(payload, default_shipping=default_shipping),
            currency=str(payload.get("currency") or currency),
            coupon=coupon,
            raw=payload,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CartErrorKind(Enum):
    NOT_AUTHENTICATED = "not_authenticated"
    REJECTED = "rejected"
    TRANSPORT = "transport"


@dataclass(frozen=True, slots=True)
class CartError:
    """
    Cart operation failure.

    Note: cause is set for TRANSPORT errors only.
    """

    kind: CartErrorKind
    message: str
    cause: ClassifiedError | None = None

    @classmethod
    def not_authenticated(cls) -> CartError:
        return cls(CartErrorKind.NOT_AUTHENTICATED, "User must be authenticated to modify the cart")

    @classmethod
    def rejected(cls, payload: RawMapping) -> CartError:
        message = payload.get("message")
        return cls(CartErrorKind.REJECTED, message if isinstance(message, str) and message else "Request rejected")

    @classmethod
    def transport(cls, err: ClassifiedError) -> CartError:
        return cls(CartErrorKind.TRANSPORT, err.message, cause=err)


__all__ = (
    "CartLine",
    "DiscountRule",
    "Coupon",
    "Cart",
    "CartErrorKind",
    "CartError",
)
