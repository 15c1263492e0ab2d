"""
Order types — checkout form, acknowledgement, submission state and errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal
from enum import Enum, auto

from cartsync._types import Payload, RawMapping
from cartsync.transport import ClassifiedError


# ═══════════════════════════════════════════════════════════════════════════════
# Shipping Address — Mutable Form State
# ═══════════════════════════════════════════════════════════════════════════════

REQUIRED_ADDRESS_FIELDS: tuple[str, ...] = ("governorate", "city", "street", "phone", "name")


@dataclass(slots=True)
class ShippingAddress:
    """
    Address being edited on the checkout form.

    Note: mutable. The coordinator owns the form and resets it after a
    successful order; a failed attempt leaves every field as typed.
    """

    name: str = ""
    phone: str = ""
    governorate: str = ""
    city: str = ""
    street: str = ""
    district: str = ""
    building_number: str = ""
    floor: str = ""
    apartment: str = ""
    landmark: str = ""
    postal_code: str = ""

    def missing_fields(self) -> tuple[str, ...]:
        """Required fields that are empty or whitespace-only."""
        return tuple(name for name in REQUIRED_ADDRESS_FIELDS if not getattr(self, name).strip())

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def to_payload(self) -> Payload:
        """
        Wire form: required fields as typed, empty optionals become None.

        Example:
            ShippingAddress(name="Omar", ..., floor="").to_payload()["floor"]  # None
        """
        payload: Payload = {}
        for f in fields(self):
            value = getattr(self, f.name).strip()
            if f.name in REQUIRED_ADDRESS_FIELDS:
                payload[f.name] = value
            else:
                payload[f.name] = value or None
        return payload

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, "")


@dataclass(slots=True)
class CheckoutForm:
    address: ShippingAddress = field(default_factory=ShippingAddress)
    notes: str = ""

    def reset(self) -> None:
        self.address.reset()
        self.notes = ""


# ═══════════════════════════════════════════════════════════════════════════════
# Order Acknowledgement
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class OrderAck:
    """
    Normalized order acknowledgement.

    Note: order_id may be None when the backend confirmed success without
    returning a record (message-only acknowledgement).
    """

    order_id: int | str | None
    order_number: str | None
    total_amount: Decimal | None
    raw: RawMapping = field(default_factory=dict, repr=False)

    @property
    def display_number(self) -> str:
        if self.order_number:
            return self.order_number
        return str(self.order_id) if self.order_id is not None else ""


# ═══════════════════════════════════════════════════════════════════════════════
# Submission State
# ═══════════════════════════════════════════════════════════════════════════════


class SubmissionState(Enum):
    """
    Coordinator lifecycle.

    Lifecycle:
        IDLE → LOCKED → SUCCEEDED → IDLE
                      → FAILED    → IDLE
    """

    IDLE = auto()
    LOCKED = auto()
    SUCCEEDED = auto()
    FAILED = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Submission Error
# ═══════════════════════════════════════════════════════════════════════════════


class SubmissionErrorKind(Enum):
    """Kinds of submission failures."""

    BUSY = auto()  # Another submission holds the lock
    INVALID_ADDRESS = auto()  # Required address fields empty
    CART_EMPTY = auto()  # No snapshot or no lines
    REJECTED = auto()  # 2xx body no matcher recognized as success
    TRANSPORT = auto()  # Classified transport failure
    UNEXPECTED = auto()  # Exception raised during the network phase


@dataclass(frozen=True, slots=True)
class SubmissionError:
    """
    Order submission failure.

    Note: cause is the transport error for TRANSPORT; missing lists the
    empty required fields for INVALID_ADDRESS.
    """

    kind: SubmissionErrorKind
    message: str
    cause: ClassifiedError | None = None
    missing: tuple[str, ...] = ()


__all__ = (
    "REQUIRED_ADDRESS_FIELDS",
    "ShippingAddress",
    "CheckoutForm",
    "OrderAck",
    "SubmissionState",
    "SubmissionErrorKind",
    "SubmissionError",
)
