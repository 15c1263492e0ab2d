from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from cartsync import ClientConfig


def test_defaults() -> None:
    config = ClientConfig()

    assert config.default_lang == "ar"
    assert config.rate_limit_delay == timedelta(seconds=2)
    assert config.navigation_delay == timedelta(seconds=3)
    assert config.default_shipping == Decimal("50")
    assert config.currency == "EGP"
    assert config.body_preview_chars == 100
    assert config.log_http is False


def test_builders_return_new_instances() -> None:
    base = ClientConfig()
    changed = base.with_base_url("https://shop.example/api/v1/").with_rate_limit_delay(seconds=0)

    assert changed.base_url == "https://shop.example/api/v1"
    assert changed.rate_limit_delay == timedelta(0)
    assert base.rate_limit_delay == timedelta(seconds=2)


def test_rejects_unsupported_language() -> None:
    with pytest.raises(ValueError):
        ClientConfig().with_default_lang("de")


def test_order_detail_route_needs_placeholder() -> None:
    with pytest.raises(ValueError):
        ClientConfig().with_routes(order_detail="/account/orders")

    config = ClientConfig().with_routes(order_detail="/orders/{order_id}/view")
    assert config.order_detail_route.format(order_id=9) == "/orders/9/view"
    assert config.order_list_route == "/account/orders"


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARTSYNC_BASE_URL", "https://api.shop.test/v1/")
    monkeypatch.setenv("CARTSYNC_DEFAULT_LANG", "EN")
    monkeypatch.setenv("CARTSYNC_RATE_LIMIT_DELAY", "0.5")
    monkeypatch.setenv("CARTSYNC_DEFAULT_SHIPPING", "35.5")
    monkeypatch.setenv("CARTSYNC_LOG_HTTP", "yes")
    monkeypatch.setenv("CARTSYNC_BODY_PREVIEW_CHARS", "20")
    monkeypatch.setenv("CARTSYNC_ORDER_DETAIL_ROUTE", "/orders/{order_id}")
    monkeypatch.setenv("CARTSYNC_LOGIN_ROUTE", "/login")

    config = ClientConfig.from_env()

    assert config.base_url == "https://api.shop.test/v1"
    assert config.default_lang == "en"
    assert config.rate_limit_delay == timedelta(seconds=0.5)
    assert config.default_shipping == Decimal("35.5")
    assert config.log_http is True
    assert config.currency == "EGP"
    assert config.body_preview_chars == 20
    assert config.order_detail_route == "/orders/{order_id}"
    assert config.order_list_route == "/account/orders"
    assert config.login_route == "/login"


def test_zero_timeout_is_kept(monkeypatch: pytest.MonkeyPatch) -> None:
    assert ClientConfig().with_timeout(seconds=0).request_timeout == timedelta(0)
    assert ClientConfig().with_timeout().request_timeout == timedelta(seconds=30)

    monkeypatch.setenv("CARTSYNC_REQUEST_TIMEOUT", "0")
    assert ClientConfig.from_env().request_timeout == timedelta(0)
