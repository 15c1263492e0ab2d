from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from cartsync import ClientConfig
from cartsync._logging import redact_headers
from cartsync.session import LANG_KEY, TOKEN_KEY, MemoryStore, SessionContext
from cartsync.transport import ErrorKind, Transport, kind_for_status
from tests.support import expect_error, expect_ok

BASE_URL = "http://shop.test/api/v1"


class FakeSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_transport(
    handler: Callable[[httpx.Request], httpx.Response],
    session: SessionContext,
    sleep: FakeSleep | None = None,
    config: ClientConfig | None = None,
) -> Transport:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    return Transport(
        session,
        config or ClientConfig().with_base_url(BASE_URL),
        client=client,
        sleep=sleep or FakeSleep(),
    )


async def anonymous() -> SessionContext:
    return await SessionContext.load(MemoryStore())


# ═══════════════════════════════════════════════════════════════════════════════
# Request decoration
# ═══════════════════════════════════════════════════════════════════════════════


async def test_attaches_bearer_token_lang_and_accept() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True})

    session = await SessionContext.load(MemoryStore({TOKEN_KEY: "abc", LANG_KEY: "en"}))
    transport = make_transport(handler, session)

    result = await transport.get("/cart", query={"page": 2, "status": None})

    assert expect_ok(result) == {"success": True}
    request = seen[0]
    assert request.headers["authorization"] == "Bearer abc"
    assert request.headers["accept"] == "application/json"
    assert request.url.params["lang"] == "en"
    assert request.url.params["page"] == "2"
    assert "status" not in request.url.params
    assert request.url.path == "/api/v1/cart"


async def test_anonymous_request_uses_default_lang_and_no_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    transport = make_transport(handler, await anonymous())
    await transport.post("/cart/add", {"product_id": 1, "quantity": 1})

    assert "authorization" not in seen[0].headers
    assert seen[0].url.params["lang"] == "ar"
    assert seen[0].headers["content-type"] == "application/json"


async def test_non_object_json_is_wrapped() -> None:
    transport = make_transport(lambda _: httpx.Response(200, json=[1, 2]), await anonymous())
    assert expect_ok(await transport.get("/orders")) == {"data": [1, 2]}


async def test_success_false_body_with_2xx_is_still_ok() -> None:
    transport = make_transport(
        lambda _: httpx.Response(200, json={"success": False, "message": "nope"}),
        await anonymous(),
    )
    assert expect_ok(await transport.get("/cart")) == {"success": False, "message": "nope"}


# ═══════════════════════════════════════════════════════════════════════════════
# Classification
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    ("status", "kind"),
    [
        (401, ErrorKind.UNAUTHENTICATED),
        (403, ErrorKind.FORBIDDEN),
        (419, ErrorKind.SESSION_EXPIRED_CSRF),
        (422, ErrorKind.VALIDATION_FAILED),
        (429, ErrorKind.RATE_LIMITED),
        (500, ErrorKind.GENERIC),
        (404, ErrorKind.GENERIC),
    ],
)
def test_kind_for_status(status: int, kind: ErrorKind) -> None:
    assert kind_for_status(status) is kind


async def test_unauthenticated_is_flagged_as_auth_failure() -> None:
    transport = make_transport(
        lambda _: httpx.Response(401, json={"message": "Unauthenticated."}),
        await anonymous(),
    )
    error = expect_error(await transport.get("/cart"))

    assert error.kind is ErrorKind.UNAUTHENTICATED
    assert error.is_auth_failure
    assert error.message == "Unauthenticated."
    assert error.status == 401


async def test_forbidden_keeps_backend_message_and_token() -> None:
    session = await SessionContext.load(MemoryStore({TOKEN_KEY: "abc"}))
    transport = make_transport(
        lambda _: httpx.Response(403, json={"message": "This action is unauthorized."}),
        session,
    )
    error = expect_error(await transport.get("/orders/1"))

    assert error.kind is ErrorKind.FORBIDDEN
    assert error.message == "This action is unauthorized."
    assert session.token == "abc"


async def test_csrf_mismatch_is_localized() -> None:
    session = await SessionContext.load(MemoryStore({LANG_KEY: "en"}))
    transport = make_transport(lambda _: httpx.Response(419, json={"message": "CSRF token mismatch."}), session)
    error = expect_error(await transport.post("/orders", {}))

    assert error.kind is ErrorKind.SESSION_EXPIRED_CSRF
    assert "Refresh the page" in error.message


async def test_validation_messages_are_flattened_and_joined() -> None:
    body = {
        "success": False,
        "message": "The given data was invalid.",
        "errors": {
            "shipping_address.city": ["The city field is required."],
            "items": ["At least one item is required.", "Quantity must be positive."],
        },
    }
    transport = make_transport(lambda _: httpx.Response(422, json=body), await anonymous())
    error = expect_error(await transport.post("/orders", {}))

    assert error.kind is ErrorKind.VALIDATION_FAILED
    assert error.message == (
        "The city field is required., At least one item is required., Quantity must be positive."
    )
    assert error.field_errors["items"] == ("At least one item is required.", "Quantity must be positive.")


async def test_validation_without_field_errors_falls_back_to_message() -> None:
    transport = make_transport(
        lambda _: httpx.Response(422, json={"message": "Invalid coupon"}),
        await anonymous(),
    )
    error = expect_error(await transport.post("/cart/apply-coupon", {"coupon_code": "X"}))
    assert error.message == "Invalid coupon"


async def test_rate_limit_sleeps_exactly_once_then_surfaces() -> None:
    calls = 0

    def handler(_: httpx.Request) -> httpx.Response:
        nonlocal calls
        calls += 1
        return httpx.Response(429, json={"message": "Too Many Attempts."})

    sleep = FakeSleep()
    config = ClientConfig().with_base_url(BASE_URL).with_rate_limit_delay(seconds=2)
    transport = make_transport(handler, await anonymous(), sleep=sleep, config=config)

    error = expect_error(await transport.get("/cart"))

    assert error.kind is ErrorKind.RATE_LIMITED
    assert sleep.calls == [2.0]
    assert calls == 1


async def test_generic_error_without_message_uses_status_line() -> None:
    transport = make_transport(lambda _: httpx.Response(500, json={}), await anonymous())
    error = expect_error(await transport.get("/cart"))

    assert error.kind is ErrorKind.GENERIC
    assert error.message == "HTTP 500: Internal Server Error"


async def test_html_body_is_rejected_before_parsing() -> None:
    html = "<!DOCTYPE html><html>" + "x" * 500
    transport = make_transport(
        lambda _: httpx.Response(500, text=html, headers={"content-type": "text/html"}),
        await anonymous(),
    )
    error = expect_error(await transport.get("/cart"))

    assert error.kind is ErrorKind.UNEXPECTED_CONTENT_TYPE
    assert error.body_preview == html[:100]
    assert error.status == 500


async def test_html_body_with_2xx_is_still_rejected() -> None:
    transport = make_transport(
        lambda _: httpx.Response(200, text="<html>login</html>", headers={"content-type": "text/html"}),
        await anonymous(),
    )
    error = expect_error(await transport.get("/cart"))
    assert error.kind is ErrorKind.UNEXPECTED_CONTENT_TYPE


async def test_malformed_json_is_unexpected_content() -> None:
    transport = make_transport(
        lambda _: httpx.Response(200, text="{not json", headers={"content-type": "application/json"}),
        await anonymous(),
    )
    error = expect_error(await transport.get("/cart"))
    assert error.kind is ErrorKind.UNEXPECTED_CONTENT_TYPE


async def test_connection_failure_is_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("Connection refused", request=request)

    transport = make_transport(handler, await anonymous())
    error = expect_error(await transport.get("/cart"))

    assert error.kind is ErrorKind.NETWORK
    assert error.status is None
    assert "Connection refused" in error.message


# ═══════════════════════════════════════════════════════════════════════════════
# Diagnostics
# ═══════════════════════════════════════════════════════════════════════════════


def test_redact_headers_masks_credentials() -> None:
    redacted = redact_headers(
        {"Authorization": "Bearer secret", "Cookie": "session=1", "Accept": "application/json"}
    )
    assert redacted == {"Authorization": "Bearer ***", "Cookie": "***", "Accept": "application/json"}


async def test_owned_client_is_closed_but_injected_client_is_not() -> None:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda _: httpx.Response(200, json={})))
    async with Transport(await anonymous(), client=client):
        pass
    assert not client.is_closed

    owned = Transport(await anonymous(), ClientConfig().with_base_url(BASE_URL))
    await owned.aclose()
    assert owned._client.is_closed
    await client.aclose()
