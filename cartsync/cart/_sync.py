"""
Cart synchronizer — local view of the server-held cart.

The server is the only authority: every accepted mutation is followed by a
full refetch, nothing is applied locally first, and a failed fetch keeps the
last snapshot.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from decimal import Decimal

import structlog
from kungfu import Result, Ok, Error

from cartsync._config import ClientConfig
from cartsync._types import Payload, RawMapping, as_mapping
from cartsync.cart._api import CartApi
from cartsync.cart._totals import ZERO
from cartsync.cart._types import Cart, CartError
from cartsync.session import SessionContext
from cartsync.transport import ClassifiedError

logger = structlog.get_logger(__name__)

type UnauthenticatedHook = Callable[[], Awaitable[None]]


class CartSynchronizer:
    """
    Holds the latest cart snapshot and issues cart mutations.

    Example:
        sync = CartSynchronizer(CartApi(transport), session, config)

        match await sync.add_line(product_id=7, quantity=2):
            case Ok(cart):
                print(cart.total)        # None when the refetch failed
            case Error(CartError(kind=CartErrorKind.REJECTED, message=msg)):
                print(msg)

    Note: concurrent mutations are not serialized. Each one refetches, and
    whichever refetch resolves last defines the snapshot.
    """

    def __init__(
        self,
        api: CartApi,
        session: SessionContext,
        config: ClientConfig | None = None,
        *,
        on_unauthenticated: UnauthenticatedHook | None = None,
    ) -> None:
        self._api = api
        self._session = session
        self._config = config or ClientConfig()
        self._on_unauthenticated = on_unauthenticated
        self._snapshot: Cart | None = None
        self._loading = False

    # ═══════════════════════════════════════════════════════════════════════════
    # State
    # ═══════════════════════════════════════════════════════════════════════════

    @property
    def api(self) -> CartApi:
        return self._api

    @property
    def snapshot(self) -> Cart | None:
        return self._snapshot

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def items_count(self) -> int:
        return self._snapshot.items_count if self._snapshot is not None else 0

    @property
    def total(self) -> Decimal:
        return self._snapshot.total if self._snapshot is not None else ZERO

    def set_unauthenticated_hook(self, hook: UnauthenticatedHook | None) -> None:
        self._on_unauthenticated = hook

    def clear(self) -> None:
        """Drop the local snapshot. The server cart is not touched."""
        self._snapshot = None

    # ═══════════════════════════════════════════════════════════════════════════
    # refresh()
    # ═══════════════════════════════════════════════════════════════════════════

    async def refresh(self, *, silent: bool = False) -> Result[Cart, CartError]:
        """
        Refetch the cart and replace the snapshot.

        silent=True skips the loading flag (background refresh after a
        mutation). On failure the previous snapshot stays in place.
        """
        if not self._session.is_authenticated:
            return Error(CartError.not_authenticated())

        if not silent:
            self._loading = True
        try:
            response = await self._api.get_cart()
        finally:
            if not silent:
                self._loading = False

        match response:
            case Ok(payload) if _accepted(payload, default=True):
                cart = self._parse(payload)
                self._snapshot = cart
                logger.debug("Cart refreshed", lines=len(cart.lines), total=str(cart.total))
                return Ok(cart)
            case Ok(payload):
                logger.info("Cart fetch rejected, keeping last snapshot", message=payload.get("message"))
                return Error(CartError.rejected(payload))
            case Error(e):
                logger.info("Cart fetch failed, keeping last snapshot", kind=e.kind.name, message=e.message)
                return Error(await self._transport_error(e))

    # ═══════════════════════════════════════════════════════════════════════════
    # Mutations
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_line(self, product_id: int | str, quantity: int = 1) -> Result[Cart | None, CartError]:
        return await self._mutate("add_line", lambda: self._api.add(product_id, quantity))

    async def update_line(self, product_id: int | str, quantity: int) -> Result[Cart | None, CartError]:
        return await self._mutate("update_line", lambda: self._api.update(product_id, quantity))

    async def remove_line(self, product_id: int | str) -> Result[Cart | None, CartError]:
        return await self._mutate("remove_line", lambda: self._api.remove(product_id))

    async def apply_coupon(self, code: str) -> Result[Cart | None, CartError]:
        return await self._mutate("apply_coupon", lambda: self._api.apply_coupon(code))

    async def remove_coupon(self) -> Result[Cart | None, CartError]:
        return await self._mutate("remove_coupon", self._api.remove_coupon)

    async def _mutate(
        self,
        operation: str,
        call: Callable[[], Awaitable[Result[Payload, ClassifiedError]]],
    ) -> Result[Cart | None, CartError]:
        """
        Run one mutation; refetch only when the server reports success.

        Ok(None) means the mutation was accepted but the refetch failed, so
        the snapshot is stale until the next refresh.
        """
        if not self._session.is_authenticated:
            return Error(CartError.not_authenticated())

        match await call():
            case Ok(payload) if _accepted(payload, default=False):
                pass
            case Ok(payload):
                logger.info("Cart mutation rejected", operation=operation, message=payload.get("message"))
                return Error(CartError.rejected(payload))
            case Error(e):
                logger.info("Cart mutation failed", operation=operation, kind=e.kind.name, message=e.message)
                return Error(await self._transport_error(e))

        match await self.refresh(silent=True):
            case Ok(cart):
                return Ok(cart)
            case Error(e):
                logger.warning("Cart refetch after mutation failed", operation=operation, message=e.message)
                return Ok(None)

    # ═══════════════════════════════════════════════════════════════════════════
    # Internals
    # ═══════════════════════════════════════════════════════════════════════════

    def _parse(self, payload: RawMapping) -> Cart:
        # { data: { cart: {...}, coupon } } | { data: {...} } | {...}
        envelope = as_mapping(payload.get("data"))
        if envelope is None:
            return Cart.from_payload(
                payload,
                currency=self._config.currency,
                default_shipping=self._config.default_shipping,
            )

        nested = as_mapping(envelope.get("cart"))
        return Cart.from_payload(
            nested if nested is not None else envelope,
            envelope=envelope if nested is not None else None,
            currency=self._config.currency,
            default_shipping=self._config.default_shipping,
        )

    async def _transport_error(self, error: ClassifiedError) -> CartError:
        if error.is_auth_failure and self._on_unauthenticated is not None:
            await self._on_unauthenticated()
        return CartError.transport(error)


def _accepted(payload: RawMapping, *, default: bool) -> bool:
    """Body-level success flag; default applies when the flag is absent."""
    if "success" not in payload:
        return default
    return bool(payload["success"])


__all__ = ("CartSynchronizer", "UnauthenticatedHook")
