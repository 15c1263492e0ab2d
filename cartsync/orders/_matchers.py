"""
Order response shape-matchers.

The order endpoint answers success in several layouts. Each matcher tries
one layout and returns an OrderAck or None; the first hit wins.

Layouts:
    {"success": true, "data": {"order": {...}}}
    {"id": 42, "order_number": "ORD-42", ...}
    {"data": {"id": 42, ...}}
    {"order": {"id": 42, ...}}
    {"message": "Order created successfully"}
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from cartsync._types import RawMapping, as_mapping
from cartsync.cart import parse_amount
from cartsync.orders._types import OrderAck

type Matcher = Callable[[RawMapping], OrderAck | None]

SUCCESS_MARKER = "success"


def _ack(record: RawMapping) -> OrderAck:
    order_id = record.get("id")
    if isinstance(order_id, bool):
        order_id = None
    number = record.get("order_number")
    return OrderAck(
        order_id=order_id,
        order_number=str(number) if number not in (None, "") else None,
        total_amount=parse_amount(record.get("total_amount", record.get("total"))),
        raw=record,
    )


def _has_id(record: RawMapping | None) -> bool:
    return record is not None and record.get("id") not in (None, "", False)


# ═══════════════════════════════════════════════════════════════════════════════
# Matchers
# ═══════════════════════════════════════════════════════════════════════════════


def match_success_flag(payload: RawMapping) -> OrderAck | None:
    """Explicit ``success: true``; the record is found in the usual wrappers."""
    if not payload.get("success"):
        return None

    data = as_mapping(payload.get("data"))
    candidates = (
        as_mapping(data.get("order")) if data is not None else None,
        data,
        as_mapping(payload.get("order")),
    )
    for record in candidates:
        if _has_id(record):
            return _ack(record)
    return _ack(data or {})


def match_top_level_id(payload: RawMapping) -> OrderAck | None:
    return _ack(payload) if _has_id(payload) else None


def match_data_wrapper(payload: RawMapping) -> OrderAck | None:
    data = as_mapping(payload.get("data"))
    return _ack(data) if data is not None and _has_id(data) else None


def match_order_wrapper(payload: RawMapping) -> OrderAck | None:
    order = as_mapping(payload.get("order"))
    return _ack(order) if order is not None and _has_id(order) else None


def match_success_message(payload: RawMapping) -> OrderAck | None:
    """A message mentioning success, unless the body carries an explicit falsy flag."""
    if "success" in payload and not payload["success"]:
        return None
    message = payload.get("message")
    if isinstance(message, str) and SUCCESS_MARKER in message.lower():
        return OrderAck(order_id=None, order_number=None, total_amount=None, raw=payload)
    return None


MATCHERS: Sequence[Matcher] = (
    match_success_flag,
    match_top_level_id,
    match_data_wrapper,
    match_order_wrapper,
    match_success_message,
)


# ═══════════════════════════════════════════════════════════════════════════════
# interpret_order_response()
# ═══════════════════════════════════════════════════════════════════════════════


def interpret_order_response(
    payload: RawMapping,
    matchers: Sequence[Matcher] = MATCHERS,
) -> OrderAck | None:
    """
    Run matchers in order. None means the body is not a success.

    Example:
        interpret_order_response({"data": {"id": 7}}).order_id   # 7
        interpret_order_response({"success": False})              # None
    """
    for matcher in matchers:
        ack = matcher(payload)
        if ack is not None:
            return ack
    return None


__all__ = (
    "Matcher",
    "SUCCESS_MARKER",
    "match_success_flag",
    "match_top_level_id",
    "match_data_wrapper",
    "match_order_wrapper",
    "match_success_message",
    "MATCHERS",
    "interpret_order_response",
)
