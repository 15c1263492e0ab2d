"""
Orders — at-most-once order submission and order endpoints.

    from cartsync import orders as O

    coordinator = O.OrderSubmissionCoordinator(
        O.OrdersApi(transport), cart_sync, session, notifier, navigator, config,
    )
    coordinator.form.address.name = "Omar"
    result = await coordinator.submit()
"""

from __future__ import annotations

from cartsync.orders._types import (
    REQUIRED_ADDRESS_FIELDS,
    ShippingAddress,
    CheckoutForm,
    OrderAck,
    SubmissionState,
    SubmissionErrorKind,
    SubmissionError,
)
from cartsync.orders._lock import SubmissionLock
from cartsync.orders._matchers import (
    Matcher,
    SUCCESS_MARKER,
    match_success_flag,
    match_top_level_id,
    match_data_wrapper,
    match_order_wrapper,
    match_success_message,
    MATCHERS,
    interpret_order_response,
)
from cartsync.orders._ports import (
    NotificationKind,
    DEFAULT_DURATION,
    SUCCESS_DURATION,
    Notification,
    Notifier,
    Navigator,
    RecordingNotifier,
    RecordingNavigator,
)
from cartsync.orders._api import OrdersApi
from cartsync.orders._coordinator import (
    PAYMENT_METHOD,
    build_order_payload,
    OrderSubmissionCoordinator,
)

__all__ = (
    # Types
    "REQUIRED_ADDRESS_FIELDS",
    "ShippingAddress",
    "CheckoutForm",
    "OrderAck",
    "SubmissionState",
    "SubmissionErrorKind",
    "SubmissionError",
    # Lock
    "SubmissionLock",
    # Matchers
    "Matcher",
    "SUCCESS_MARKER",
    "match_success_flag",
    "match_top_level_id",
    "match_data_wrapper",
    "match_order_wrapper",
    "match_success_message",
    "MATCHERS",
    "interpret_order_response",
    # Ports
    "NotificationKind",
    "DEFAULT_DURATION",
    "SUCCESS_DURATION",
    "Notification",
    "Notifier",
    "Navigator",
    "RecordingNotifier",
    "RecordingNavigator",
    # Endpoints + coordinator
    "OrdersApi",
    "PAYMENT_METHOD",
    "build_order_payload",
    "OrderSubmissionCoordinator",
)
