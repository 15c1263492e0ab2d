"""
Storefront — wires session, transport, cart and checkout together.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from kungfu import Result

from cartsync._config import ClientConfig
from cartsync.cart import CartApi, CartSynchronizer
from cartsync.orders import (
    Navigator,
    Notifier,
    OrdersApi,
    OrderSubmissionCoordinator,
    RecordingNavigator,
    RecordingNotifier,
)
from cartsync.session import SessionContext, Store, StoreError
from cartsync.transport import Sleep, Transport

logger = structlog.get_logger(__name__)


class Storefront:
    """
    One storefront session.

    Example:
        async with Storefront.open(config, store, notifier=ui, navigator=router) as shop:
            await shop.sign_in_with_token(token)
            await shop.cart.add_line(product_id=7, quantity=2)
            shop.checkout.form.address.name = "Omar"
            ...
            await shop.checkout.submit()

    Note: a 401 from any cart or checkout call ends the session and
    navigates to config.login_route.
    """

    def __init__(
        self,
        session: SessionContext,
        transport: Transport,
        config: ClientConfig,
        notifier: Notifier,
        navigator: Navigator,
    ) -> None:
        self.session = session
        self.transport = transport
        self.config = config
        self.navigator = navigator
        self.cart = CartSynchronizer(
            CartApi(transport),
            session,
            config,
            on_unauthenticated=self.handle_unauthenticated,
        )
        self.orders = OrdersApi(transport)
        self.checkout = OrderSubmissionCoordinator(
            self.orders,
            self.cart,
            session,
            notifier,
            navigator,
            config,
            on_unauthenticated=self.handle_unauthenticated,
        )

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        config: ClientConfig | None = None,
        store: Store | None = None,
        *,
        notifier: Notifier | None = None,
        navigator: Navigator | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> AsyncIterator[Storefront]:
        """
        Load the persisted session and open the HTTP client.

        Pending post-order navigation is cancelled on exit.
        """
        config = config or ClientConfig()
        session = await SessionContext.load(store, default_lang=config.default_lang)
        async with Transport(session, config, client=client, sleep=sleep) as transport:
            storefront = cls(
                session,
                transport,
                config,
                notifier if notifier is not None else RecordingNotifier(),
                navigator if navigator is not None else RecordingNavigator(),
            )
            logger.info("Storefront session opened", authenticated=session.is_authenticated, lang=session.lang)
            try:
                yield storefront
            finally:
                storefront.checkout.cancel_pending_navigation()

    # ═══════════════════════════════════════════════════════════════════════════
    # Session Lifecycle
    # ═══════════════════════════════════════════════════════════════════════════

    async def sign_in_with_token(self, token: str) -> Result[None, StoreError]:
        """Adopt a token obtained by the login flow and load the cart."""
        stored = await self.session.set_token(token)
        await self.cart.refresh(silent=True)
        return stored

    async def set_language(self, lang: str) -> Result[None, StoreError]:
        return await self.session.set_lang(lang)

    async def end_session(self) -> Result[None, StoreError]:
        """Forget the token and the local cart. The server cart is kept."""
        self.cart.clear()
        result = await self.session.clear_token()
        logger.info("Storefront session ended")
        return result

    async def handle_unauthenticated(self) -> None:
        logger.info("Backend rejected the session, redirecting to login", route=self.config.login_route)
        await self.end_session()
        self.navigator.navigate(self.config.login_route)


__all__ = ("Storefront",)
