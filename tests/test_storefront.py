from __future__ import annotations

import httpx

from cartsync import ClientConfig, Storefront
from cartsync.cart import CartErrorKind
from cartsync.orders import RecordingNavigator
from cartsync.session import LANG_KEY, TOKEN_KEY, MemoryStore
from tests.backend import TOKEN, BackendState
from tests.support import expect_error, expect_ok, fill_address


async def test_open_loads_persisted_session(shop: Storefront) -> None:
    assert shop.session.is_authenticated
    assert shop.session.lang == "ar"


async def test_end_to_end_checkout(shop: Storefront, state: BackendState) -> None:
    expect_ok(await shop.cart.add_line(1, 1))
    expect_ok(await shop.cart.add_line(2, 2))
    fill_address(shop.checkout)

    ack = expect_ok(await shop.checkout.submit())

    assert ack.order_number == "ORD-1000"
    assert ack.total_amount is not None
    assert state.orders[0]["items"] == [
        {"product_id": 1, "quantity": 1, "variant_id": None, "price": 100},
        {"product_id": 2, "quantity": 2, "variant_id": None, "price": 50},
    ]
    assert shop.cart.snapshot is None

    listed = expect_ok(await shop.orders.list_orders(status="pending"))
    assert [o["id"] for o in listed["data"]] == [1000]

    detail = expect_ok(await shop.orders.get_order(1000))
    assert detail["data"]["order_number"] == "ORD-1000"

    tracking = expect_ok(await shop.orders.track_order(1000))
    assert tracking["data"]["status"] == "pending"

    cancelled = expect_ok(await shop.orders.cancel_order(1000, reason="Changed my mind"))
    assert cancelled["data"]["status"] == "cancelled"
    assert cancelled["data"]["cancel_reason"] == "Changed my mind"


async def test_every_request_carries_lang(shop: Storefront, state: BackendState) -> None:
    await shop.cart.refresh()
    expect_ok(await shop.set_language("en"))
    await shop.cart.refresh()

    assert state.langs == ["ar", "en"]


async def test_sign_in_with_token_persists_and_loads_cart(
    config: ClientConfig, client: httpx.AsyncClient, state: BackendState
) -> None:
    state.lines = {1: 1}
    store = MemoryStore()

    async with Storefront.open(config, store, client=client) as shop:
        assert not shop.session.is_authenticated
        expect_ok(await shop.sign_in_with_token(TOKEN))

        assert shop.cart.items_count == 1
        assert expect_ok(await store.get(TOKEN_KEY)) == TOKEN


async def test_end_session_clears_token_and_local_cart(shop: Storefront, state: BackendState) -> None:
    state.lines = {1: 1}
    await shop.cart.refresh()

    expect_ok(await shop.end_session())

    assert shop.cart.snapshot is None
    assert not shop.session.is_authenticated
    assert state.lines == {1: 1}
    assert expect_error(await shop.cart.refresh()).kind is CartErrorKind.NOT_AUTHENTICATED


async def test_unauthenticated_response_ends_session_and_redirects(
    shop: Storefront, state: BackendState, navigator: RecordingNavigator
) -> None:
    state.lines = {1: 1}
    await shop.cart.refresh()
    state.token = "rotated"

    await shop.cart.add_line(2)

    assert not shop.session.is_authenticated
    assert shop.cart.snapshot is None
    assert navigator.routes == ["/auth/login?redirect=/checkout"]


async def test_persisted_language_is_used(config: ClientConfig, client: httpx.AsyncClient, state: BackendState) -> None:
    store = MemoryStore({TOKEN_KEY: TOKEN, LANG_KEY: "en"})

    async with Storefront.open(config, store, client=client) as shop:
        await shop.cart.refresh()

    assert state.langs == ["en"]
