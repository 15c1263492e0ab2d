"""
Totals — derive subtotal/shipping/tax/discount/total from a cart snapshot.

The backend's cart shape is not fixed across endpoints and versions, so each
field is resolved from an ordered list of sources; the first one that yields
a finite number wins.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from cartsync._types import RawMapping, as_mapping


ZERO = Decimal("0")
DEFAULT_SHIPPING = Decimal("50")


@dataclass(frozen=True, slots=True)
class Totals:
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    discount: Decimal
    total: Decimal


# ═══════════════════════════════════════════════════════════════════════════════
# Number Parsing
# ═══════════════════════════════════════════════════════════════════════════════


def parse_amount(value: object) -> Decimal | None:
    """
    Parse a number or its text form. None when absent or invalid.

    Example:
        parse_amount("12.50")   # Decimal("12.50")
        parse_amount(3)         # Decimal("3")
        parse_amount("n/a")     # None
        parse_amount(True)      # None
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int | float):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    return amount if amount.is_finite() else None


def first_amount(candidates: Iterable[object], *, positive: bool = False) -> Decimal | None:
    """First candidate that parses (and is > 0 when positive=True)."""
    for candidate in candidates:
        amount = parse_amount(candidate)
        if amount is None:
            continue
        if positive and amount <= 0:
            continue
        return amount
    return None


# ═══════════════════════════════════════════════════════════════════════════════
# Line Amounts
# ═══════════════════════════════════════════════════════════════════════════════

_LINE_TOTAL_KEYS = ("total", "total_price", "subtotal")


def line_amount(line: object) -> Decimal | None:
    """
    Amount contributed by one cart line, None when nothing numeric is found.

    Order: explicit line total → unit_price × quantity → price × quantity
    (product.price as last price source).
    """
    data = as_mapping(line)
    if data is None:
        return None

    explicit = first_amount(data.get(key) for key in _LINE_TOTAL_KEYS)
    if explicit is not None:
        return explicit

    quantity = parse_amount(data.get("quantity"))
    if quantity is None:
        return None

    product = as_mapping(data.get("product")) or {}
    price = first_amount((data.get("unit_price"), data.get("price"), product.get("price")))
    if price is None:
        return None
    return price * quantity


def line_quantity(line: object) -> int | None:
    """
    Quantity of an orderable line: one with a product id and a positive
    whole quantity. None for anything else.

    Example:
        line_quantity({"product_id": 7, "quantity": "2"})   # 2
        line_quantity({"product_id": 7, "quantity": 1.5})   # None
        line_quantity({"quantity": 3})                       # None
    """
    data = as_mapping(line)
    if data is None:
        return None

    product = as_mapping(data.get("product")) or {}
    product_id = data.get("product_id", product.get("id"))
    if product_id is None or isinstance(product_id, bool):
        return None

    quantity = parse_amount(data.get("quantity"))
    if quantity is None or quantity <= 0 or quantity != quantity.to_integral_value():
        return None
    return int(quantity)


def lines_subtotal(lines: object) -> Decimal:
    """Sum of orderable line amounts; other lines are skipped."""
    if not isinstance(lines, list | tuple):
        return ZERO
    amounts = (line_amount(line) for line in lines if line_quantity(line) is not None)
    return sum((a for a in amounts if a is not None), ZERO)


# ═══════════════════════════════════════════════════════════════════════════════
# compute_totals()
# ═══════════════════════════════════════════════════════════════════════════════


def compute_totals(
    snapshot: RawMapping | None,
    *,
    default_shipping: Decimal = DEFAULT_SHIPPING,
) -> Totals:
    """
    Resolve every total field of a raw cart snapshot.

    Sources, first success wins:
        subtotal  summary.subtotal → cart.subtotal (both > 0) → Σ lines
        shipping  summary.estimated_shipping → summary.shipping → cart.shipping → default
        tax       summary.estimated_tax → summary.tax → cart.tax → 0
        discount  summary.discount → cart.discount → 0
        total     summary.estimated_total → summary.total → cart.total (all > 0)
                  → subtotal + shipping + tax − discount
    """
    cart = snapshot or {}
    summary = as_mapping(cart.get("summary")) or {}

    subtotal = first_amount(
        (summary.get("subtotal"), cart.get("subtotal")),
        positive=True,
    )
    if subtotal is None:
        subtotal = lines_subtotal(cart.get("items"))

    shipping = first_amount(
        (summary.get("estimated_shipping"), summary.get("shipping"), cart.get("shipping"))
    )
    if shipping is None:
        shipping = default_shipping

    tax = first_amount((summary.get("estimated_tax"), summary.get("tax"), cart.get("tax")))
    if tax is None:
        tax = ZERO

    discount = first_amount((summary.get("discount"), cart.get("discount")))
    if discount is None:
        discount = ZERO

    total = first_amount(
        (summary.get("estimated_total"), summary.get("total"), cart.get("total")),
        positive=True,
    )
    if total is None:
        total = subtotal + shipping + tax - discount

    return Totals(
        subtotal=subtotal,
        shipping=shipping,
        tax=tax,
        discount=discount,
        total=total,
    )


__all__ = (
    "Totals",
    "DEFAULT_SHIPPING",
    "parse_amount",
    "first_amount",
    "line_amount",
    "line_quantity",
    "lines_subtotal",
    "compute_totals",
)
