"""
Client configuration — immutable, fluent, env-aware.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import timedelta
from decimal import Decimal


DEFAULT_BASE_URL = "http://127.0.0.1:8000/api/v1"
DEFAULT_LANG = "ar"
SUPPORTED_LANGS = frozenset({"ar", "en"})


# ═══════════════════════════════════════════════════════════════════════════════
# ClientConfig — Full Configuration
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """
    Storefront client configuration.

    Fluent builder pattern — chain methods to configure.

    Example:
        config = (
            ClientConfig()
            .with_base_url("https://shop.example/api/v1")
            .with_rate_limit_delay(seconds=2)
            .with_navigation_delay(seconds=3)
            .with_http_logging()
        )

    Note: Immutable — each method returns a new ClientConfig.

    Env vars (see from_env):
    - CARTSYNC_BASE_URL (default: http://127.0.0.1:8000/api/v1)
    - CARTSYNC_DEFAULT_LANG (default: ar)
    - CARTSYNC_REQUEST_TIMEOUT (seconds, default: 30)
    - CARTSYNC_RATE_LIMIT_DELAY (seconds, default: 2)
    - CARTSYNC_NAVIGATION_DELAY (seconds, default: 3)
    - CARTSYNC_DEFAULT_SHIPPING (default: 50)
    - CARTSYNC_CURRENCY (default: EGP)
    - CARTSYNC_LOG_HTTP (default: false)
    - CARTSYNC_BODY_PREVIEW_CHARS (default: 100)
    - CARTSYNC_ORDER_DETAIL_ROUTE (default: /account/orders/{order_id})
    - CARTSYNC_ORDER_LIST_ROUTE (default: /account/orders)
    - CARTSYNC_LOGIN_ROUTE (default: /auth/login?redirect=/checkout)
    """

    base_url: str = DEFAULT_BASE_URL
    default_lang: str = DEFAULT_LANG
    request_timeout: timedelta = timedelta(seconds=30)
    # One fixed pause on HTTP 429 before the error is surfaced.
    rate_limit_delay: timedelta = timedelta(seconds=2)
    body_preview_chars: int = 100
    default_shipping: Decimal = Decimal("50")
    currency: str = "EGP"
    navigation_delay: timedelta = timedelta(seconds=3)
    log_http: bool = False
    order_detail_route: str = "/account/orders/{order_id}"
    order_list_route: str = "/account/orders"
    login_route: str = "/auth/login?redirect=/checkout"

    def with_base_url(self, url: str) -> ClientConfig:
        """Set the backend base URL (trailing slash stripped)."""
        return replace(self, base_url=url.rstrip("/"))

    def with_default_lang(self, lang: str) -> ClientConfig:
        """
        Set the locale used when none has been chosen.

        Example:
            .with_default_lang("en")
        """
        if lang not in SUPPORTED_LANGS:
            raise ValueError(f"Unsupported language {lang!r}. Expected one of {sorted(SUPPORTED_LANGS)}.")
        return replace(self, default_lang=lang)

    def with_timeout(self, *, seconds: float | None = None, delta: timedelta | None = None) -> ClientConfig:
        """Set per-request timeout."""
        if delta is None:
            delta = timedelta(seconds=seconds if seconds is not None else 30)
        return replace(self, request_timeout=delta)

    def with_rate_limit_delay(
        self,
        *,
        seconds: float | None = None,
        delta: timedelta | None = None,
    ) -> ClientConfig:
        """
        Set the single pause applied on HTTP 429.

        Example:
            .with_rate_limit_delay(seconds=0)  # tests
        """
        delay = delta if delta is not None else timedelta(seconds=seconds if seconds is not None else 0)
        return replace(self, rate_limit_delay=delay)

    def with_navigation_delay(
        self,
        *,
        seconds: float | None = None,
        delta: timedelta | None = None,
    ) -> ClientConfig:
        """Set the pause between order success and navigation."""
        delay = delta if delta is not None else timedelta(seconds=seconds if seconds is not None else 0)
        return replace(self, navigation_delay=delay)

    def with_default_shipping(self, amount: Decimal | int | str) -> ClientConfig:
        """Set shipping used when the cart carries no estimate."""
        return replace(self, default_shipping=Decimal(str(amount)))

    def with_currency(self, currency: str) -> ClientConfig:
        return replace(self, currency=currency)

    def with_body_preview(self, chars: int) -> ClientConfig:
        """Set how much of a non-JSON body is kept for diagnostics."""
        return replace(self, body_preview_chars=max(chars, 0))

    def with_http_logging(self, enabled: bool = True) -> ClientConfig:
        """Toggle request/response diagnostics (token always redacted)."""
        return replace(self, log_http=enabled)

    def with_routes(
        self,
        *,
        order_detail: str | None = None,
        order_list: str | None = None,
        login: str | None = None,
    ) -> ClientConfig:
        """
        Override navigation targets.

        order_detail must contain an ``{order_id}`` placeholder.
        """
        if order_detail is not None and "{order_id}" not in order_detail:
            raise ValueError("order_detail route must contain '{order_id}'")
        return replace(
            self,
            order_detail_route=order_detail or self.order_detail_route,
            order_list_route=order_list or self.order_list_route,
            login_route=login or self.login_route,
        )

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build configuration from CARTSYNC_* environment variables."""
        config = cls()
        return (
            config.with_base_url(os.getenv("CARTSYNC_BASE_URL", DEFAULT_BASE_URL))
            .with_default_lang(os.getenv("CARTSYNC_DEFAULT_LANG", DEFAULT_LANG).strip().lower())
            .with_timeout(seconds=float(os.getenv("CARTSYNC_REQUEST_TIMEOUT", "30")))
            .with_rate_limit_delay(seconds=float(os.getenv("CARTSYNC_RATE_LIMIT_DELAY", "2")))
            .with_navigation_delay(seconds=float(os.getenv("CARTSYNC_NAVIGATION_DELAY", "3")))
            .with_default_shipping(os.getenv("CARTSYNC_DEFAULT_SHIPPING", "50"))
            .with_currency(os.getenv("CARTSYNC_CURRENCY", "EGP"))
            .with_http_logging(_parse_bool(os.getenv("CARTSYNC_LOG_HTTP", "false")))
            .with_body_preview(int(os.getenv("CARTSYNC_BODY_PREVIEW_CHARS", "100")))
            .with_routes(
                order_detail=os.getenv("CARTSYNC_ORDER_DETAIL_ROUTE"),
                order_list=os.getenv("CARTSYNC_ORDER_LIST_ROUTE"),
                login=os.getenv("CARTSYNC_LOGIN_ROUTE"),
            )
        )


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_LANG",
    "SUPPORTED_LANGS",
)
