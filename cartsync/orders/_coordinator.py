"""
Order submission coordinator — exactly one in-flight order per session.

Lifecycle of submit():

    IDLE ──try_acquire──► LOCKED ──► validate ──► POST /orders ──► interpret
                            │                                        │
                            │              ┌─────────────────────────┤
                            ▼              ▼                         ▼
                         (BUSY)         FAILED                   SUCCEEDED
                                     notify error           clear cart, reset form,
                                     keep form/cart         notify, release,
                                        release             schedule navigation
                                           │                         │
                                           └──────────► IDLE ◄───────┘
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal

import structlog
from combinators import lift as L
from kungfu import Result, Ok, Error

from cartsync._config import ClientConfig
from cartsync._messages import localize_backend_message, translate
from cartsync._types import Payload
from cartsync.cart import Cart, CartSynchronizer
from cartsync.orders._api import OrdersApi
from cartsync.orders._lock import SubmissionLock
from cartsync.orders._matchers import interpret_order_response
from cartsync.orders._ports import (
    DEFAULT_DURATION,
    SUCCESS_DURATION,
    Navigator,
    Notification,
    NotificationKind,
    Notifier,
)
from cartsync.orders._types import (
    CheckoutForm,
    OrderAck,
    SubmissionError,
    SubmissionErrorKind,
    SubmissionState,
)
from cartsync.session import SessionContext
from cartsync.transport import ClassifiedError

logger = structlog.get_logger(__name__)

PAYMENT_METHOD = "cash_on_delivery"


# ═══════════════════════════════════════════════════════════════════════════════
# Payload
# ═══════════════════════════════════════════════════════════════════════════════


def _json_number(amount: Decimal) -> int | float:
    return int(amount) if amount == amount.to_integral_value() else float(amount)


def build_order_payload(cart: Cart, form: CheckoutForm) -> Payload:
    """
    Order request body for one attempt.

    Example:
        {
            "shipping_address": {"name": "...", ..., "floor": None},
            "payment_method": "cash_on_delivery",
            "items": [{"product_id": 7, "quantity": 2, "variant_id": None, "price": 150}],
            "notes": "",
            "coupon_code": None,
        }
    """
    return {
        "shipping_address": form.address.to_payload(),
        "payment_method": PAYMENT_METHOD,
        "items": [
            {
                "product_id": line.product_id,
                "quantity": line.quantity,
                "variant_id": None,
                "price": _json_number(line.unit_price),
            }
            for line in cart.lines
        ],
        "notes": form.notes,
        "coupon_code": cart.coupon.code if cart.coupon is not None else None,
    }


# ═══════════════════════════════════════════════════════════════════════════════
# OrderSubmissionCoordinator
# ═══════════════════════════════════════════════════════════════════════════════


class OrderSubmissionCoordinator:
    """
    Turns the checkout form plus the current cart into one order.

    Example:
        coordinator = OrderSubmissionCoordinator(
            OrdersApi(transport), cart_sync, session, notifier, navigator, config,
        )
        coordinator.form.address.name = "Omar"
        ...
        match await coordinator.submit():
            case Ok(ack):
                ...  # navigation fires after config.navigation_delay
            case Error(SubmissionError(kind=SubmissionErrorKind.BUSY)):
                ...  # a previous submit is still running

    Note: the busy check happens before the first await, so a second call
    scheduled on the same loop can never reach the network.
    """

    def __init__(
        self,
        api: OrdersApi,
        cart: CartSynchronizer,
        session: SessionContext,
        notifier: Notifier,
        navigator: Navigator,
        config: ClientConfig | None = None,
        *,
        form: CheckoutForm | None = None,
        on_unauthenticated: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._api = api
        self._cart = cart
        self._session = session
        self._notifier = notifier
        self._navigator = navigator
        self._config = config or ClientConfig()
        self._on_unauthenticated = on_unauthenticated
        self._lock = SubmissionLock()
        self._state = SubmissionState.IDLE
        self.form = form or CheckoutForm()
        self.pending_navigation: asyncio.TimerHandle | None = None

    @property
    def state(self) -> SubmissionState:
        return self._state

    @property
    def is_submitting(self) -> bool:
        return self._lock.held

    def set_unauthenticated_hook(self, hook: Callable[[], Awaitable[None]] | None) -> None:
        self._on_unauthenticated = hook

    def cancel_pending_navigation(self) -> None:
        if self.pending_navigation is not None:
            self.pending_navigation.cancel()
            self.pending_navigation = None

    # ═══════════════════════════════════════════════════════════════════════════
    # submit()
    # ═══════════════════════════════════════════════════════════════════════════

    async def submit(self) -> Result[OrderAck, SubmissionError]:
        """
        Submit the checkout form as one order.

        Every exit path releases the lock. Navigation is scheduled only after
        the release, so the next submit is possible during the delay.
        """
        if not self._lock.try_acquire():
            message = translate("please_wait", self._session.lang)
            logger.info("Order submission ignored, already in flight")
            self._notify(NotificationKind.WARNING, translate("warning", self._session.lang), message)
            return Error(SubmissionError(SubmissionErrorKind.BUSY, message))

        self._transition(SubmissionState.LOCKED)
        ack: OrderAck | None = None
        try:
            match await self._attempt():
                case Ok(ack):
                    await self._succeed(ack)
                    outcome: Result[OrderAck, SubmissionError] = Ok(ack)
                case Error(e):
                    self._fail(e)
                    outcome = Error(e)
        finally:
            self._lock.release()
            self._transition(SubmissionState.IDLE)

        if ack is not None:
            self._schedule_navigation(ack)
        return outcome

    async def _attempt(self) -> Result[OrderAck, SubmissionError]:
        lang = self._session.lang

        missing = self.form.address.missing_fields()
        if missing:
            names = ", ".join(translate(f"field.{name}", lang) for name in missing)
            return Error(
                SubmissionError(
                    SubmissionErrorKind.INVALID_ADDRESS,
                    translate("incomplete_address", lang, fields=names),
                    missing=missing,
                )
            )

        cart = self._cart.snapshot
        if cart is None or cart.is_empty:
            return Error(SubmissionError(SubmissionErrorKind.CART_EMPTY, translate("cart_empty", lang)))

        payload = build_order_payload(cart, self.form)
        logger.info("Submitting order", lines=len(cart.lines), total=str(cart.total))

        async def do_create() -> Result[Payload, ClassifiedError]:
            return await self._api.create_order(payload)

        response = await L.catching_async(
            do_create,
            on_error=lambda e: SubmissionError(SubmissionErrorKind.UNEXPECTED, str(e) or type(e).__name__),
        )

        match response:
            case Error(e):
                return Error(e)
            case Ok(Error(e)):
                if e.is_auth_failure and self._on_unauthenticated is not None:
                    await self._on_unauthenticated()
                return Error(
                    SubmissionError(
                        SubmissionErrorKind.TRANSPORT,
                        localize_backend_message(e.message, lang),
                        cause=e,
                    )
                )
            case Ok(Ok(body)):
                ack = interpret_order_response(body)
                if ack is not None:
                    if ack.total_amount is None:
                        return Ok(replace(ack, total_amount=cart.total))
                    return Ok(ack)
                message = body.get("message")
                return Error(
                    SubmissionError(
                        SubmissionErrorKind.REJECTED,
                        localize_backend_message(message, lang)
                        if isinstance(message, str) and message
                        else translate("order_failed", lang),
                    )
                )

    # ═══════════════════════════════════════════════════════════════════════════
    # Outcomes
    # ═══════════════════════════════════════════════════════════════════════════

    async def _succeed(self, ack: OrderAck) -> None:
        currency = self._cart.snapshot.currency if self._cart.snapshot is not None else self._config.currency

        # The order exists at this point; a failed clear only leaves a stale server cart.
        match await self._cart.api.clear():
            case Ok(_):
                pass
            case Error(e):
                logger.warning("Server cart clear after order failed", order_id=ack.order_id, message=e.message)

        self._cart.clear()
        self.form.reset()
        self._transition(SubmissionState.SUCCEEDED, order_id=ack.order_id)

        lang = self._session.lang
        self._notify(
            NotificationKind.SUCCESS,
            translate("order_success_title", lang),
            translate(
                "order_success",
                lang,
                order_number=ack.display_number,
                total=ack.total_amount if ack.total_amount is not None else "",
                currency=currency,
            ),
            duration=SUCCESS_DURATION,
        )

    def _fail(self, error: SubmissionError) -> None:
        self._transition(SubmissionState.FAILED, kind=error.kind.name, message=error.message)
        lang = self._session.lang
        title = (
            translate("error", lang)
            if error.kind in (SubmissionErrorKind.INVALID_ADDRESS, SubmissionErrorKind.CART_EMPTY)
            else translate("order_error", lang)
        )
        self._notify(NotificationKind.ERROR, title, error.message)

    def _schedule_navigation(self, ack: OrderAck) -> None:
        if ack.order_id is not None:
            route = self._config.order_detail_route.format(order_id=ack.order_id)
        else:
            route = self._config.order_list_route

        self.cancel_pending_navigation()
        loop = asyncio.get_running_loop()
        self.pending_navigation = loop.call_later(
            self._config.navigation_delay.total_seconds(),
            self._navigator.navigate,
            route,
        )
        logger.debug("Navigation scheduled", route=route, delay=self._config.navigation_delay.total_seconds())

    # ═══════════════════════════════════════════════════════════════════════════
    # Internals
    # ═══════════════════════════════════════════════════════════════════════════

    def _notify(
        self,
        kind: NotificationKind,
        title: str,
        message: str,
        *,
        duration: timedelta = DEFAULT_DURATION,
    ) -> None:
        self._notifier.notify(Notification(kind, title, message, duration))

    def _transition(self, state: SubmissionState, **context: object) -> None:
        logger.info("Order submission state", previous=self._state.name, state=state.name, **context)
        self._state = state


__all__ = (
    "PAYMENT_METHOD",
    "build_order_payload",
    "OrderSubmissionCoordinator",
)
