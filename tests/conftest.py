from __future__ import annotations

from collections.abc import AsyncIterator

import httpx
import pytest

from cartsync import ClientConfig, Storefront
from cartsync.cart import CartApi, CartSynchronizer
from cartsync.orders import OrdersApi, OrderSubmissionCoordinator, RecordingNavigator, RecordingNotifier
from cartsync.session import TOKEN_KEY, MemoryStore, SessionContext
from cartsync.transport import Transport
from tests.backend import BackendState, create_app

BASE_URL = "http://shop.test/api/v1"


@pytest.fixture
def state() -> BackendState:
    return BackendState.seeded()


@pytest.fixture
def config() -> ClientConfig:
    return (
        ClientConfig()
        .with_base_url(BASE_URL)
        .with_rate_limit_delay(seconds=0)
        .with_navigation_delay(seconds=0.01)
    )


@pytest.fixture
async def client(state: BackendState) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=create_app(state)), base_url=BASE_URL) as c:
        yield c


@pytest.fixture
async def session(state: BackendState) -> SessionContext:
    return await SessionContext.load(MemoryStore({TOKEN_KEY: state.token}))


@pytest.fixture
def transport(session: SessionContext, config: ClientConfig, client: httpx.AsyncClient) -> Transport:
    return Transport(session, config, client=client)


@pytest.fixture
def cart_sync(transport: Transport, session: SessionContext, config: ClientConfig) -> CartSynchronizer:
    return CartSynchronizer(CartApi(transport), session, config)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


@pytest.fixture
def coordinator(
    transport: Transport,
    cart_sync: CartSynchronizer,
    session: SessionContext,
    notifier: RecordingNotifier,
    navigator: RecordingNavigator,
    config: ClientConfig,
) -> OrderSubmissionCoordinator:
    return OrderSubmissionCoordinator(OrdersApi(transport), cart_sync, session, notifier, navigator, config)


@pytest.fixture
async def shop(
    state: BackendState,
    config: ClientConfig,
    client: httpx.AsyncClient,
    notifier: RecordingNotifier,
    navigator: RecordingNavigator,
) -> AsyncIterator[Storefront]:
    store = MemoryStore({TOKEN_KEY: state.token})
    async with Storefront.open(config, store, notifier=notifier, navigator=navigator, client=client) as s:
        yield s

