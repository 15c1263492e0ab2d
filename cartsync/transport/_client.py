"""
Transport normalizer — every backend call goes through here.

Responsibilities:
- inject Accept, bearer token and ``lang``
- refuse non-JSON bodies before parsing
- classify non-2xx responses into ErrorKind
- one fixed pause on 429, never a retry loop
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import structlog
from kungfu import Result, Ok, Error

from cartsync._config import ClientConfig
from cartsync._logging import redact_headers
from cartsync._messages import translate
from cartsync._types import Payload, Query, as_mapping
from cartsync.session import SessionContext
from cartsync.transport._errors import ClassifiedError, ErrorKind, kind_for_status

logger = structlog.get_logger(__name__)

type Sleep = Callable[[float], Awaitable[None]]


class Transport:
    """
    Async JSON transport bound to one session.

    Example:
        async with Transport(session, config) as transport:
            match await transport.get("/cart"):
                case Ok(payload):
                    ...
                case Error(err) if err.is_auth_failure:
                    await session.clear_token()

    Note: pass ``client`` to reuse a configured httpx.AsyncClient (tests mount
    an ASGI app this way). A supplied client is not closed by aclose().
    """

    def __init__(
        self,
        session: SessionContext,
        config: ClientConfig | None = None,
        *,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._session = session
        self._config = config or ClientConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.request_timeout.total_seconds(),
        )
        self._sleep = sleep

    @property
    def session(self) -> SessionContext:
        return self._session

    async def __aenter__(self) -> Transport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ═══════════════════════════════════════════════════════════════════════════
    # Request
    # ═══════════════════════════════════════════════════════════════════════════

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        query: Query | None = None,
    ) -> Result[Payload, ClassifiedError]:
        """
        Send one request and normalize the outcome.

        Any 2xx is Ok regardless of a body-level ``success`` flag; callers
        interpret that flag themselves.
        """
        request = self._client.build_request(
            method.upper(),
            path,
            params=self._params(query),
            headers=self._headers(),
            json=body,
        )

        if self._config.log_http:
            logger.debug(
                "HTTP request",
                method=request.method,
                url=str(request.url),
                headers=redact_headers(dict(request.headers)),
                body=body,
            )

        try:
            response = await self._client.send(request)
        except httpx.TransportError as e:
            logger.warning("HTTP transport failure", method=request.method, url=str(request.url), error=repr(e))
            return Error(ClassifiedError(ErrorKind.NETWORK, str(e) or type(e).__name__))

        return await self._normalize(response)

    async def get(self, path: str, query: Query | None = None) -> Result[Payload, ClassifiedError]:
        return await self.request("GET", path, query=query)

    async def post(self, path: str, body: Any = None, query: Query | None = None) -> Result[Payload, ClassifiedError]:
        return await self.request("POST", path, body=body, query=query)

    async def put(self, path: str, body: Any = None, query: Query | None = None) -> Result[Payload, ClassifiedError]:
        return await self.request("PUT", path, body=body, query=query)

    async def delete(self, path: str, query: Query | None = None) -> Result[Payload, ClassifiedError]:
        return await self.request("DELETE", path, query=query)

    # ═══════════════════════════════════════════════════════════════════════════
    # Internals
    # ═══════════════════════════════════════════════════════════════════════════

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self._session.token
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _params(self, query: Query | None) -> dict[str, Any]:
        params: dict[str, Any] = {"lang": self._session.lang}
        for key, value in (query or {}).items():
            if value is None:
                continue
            params[key] = value
        return params

    async def _normalize(self, response: httpx.Response) -> Result[Payload, ClassifiedError]:
        status = response.status_code
        content_type = response.headers.get("content-type", "")

        # An HTML error page must never reach the JSON parser.
        if "application/json" not in content_type.lower():
            preview = response.text[: self._config.body_preview_chars]
            logger.error("Unexpected content type", status=status, content_type=content_type, preview=preview)
            return Error(
                ClassifiedError(
                    ErrorKind.UNEXPECTED_CONTENT_TYPE,
                    f"Expected JSON but got {content_type or 'no content type'}. Response: {preview}",
                    status=status,
                    body_preview=preview,
                )
            )

        try:
            data = response.json()
        except ValueError:
            preview = response.text[: self._config.body_preview_chars]
            return Error(
                ClassifiedError(
                    ErrorKind.UNEXPECTED_CONTENT_TYPE,
                    f"Malformed JSON body. Response: {preview}",
                    status=status,
                    body_preview=preview,
                )
            )

        if self._config.log_http:
            logger.debug("HTTP response", status=status, url=str(response.request.url), body=data)

        if response.is_success:
            payload = as_mapping(data)
            return Ok(dict(payload) if payload is not None else {"data": data})

        return Error(await self._classify(response, data))

    async def _classify(self, response: httpx.Response, data: Any) -> ClassifiedError:
        status = response.status_code
        kind = kind_for_status(status)
        body = as_mapping(data) or {}
        backend_message = body.get("message") if isinstance(body.get("message"), str) else None
        fallback = backend_message or f"HTTP {status}: {response.reason_phrase}"
        lang = self._session.lang

        match kind:
            case ErrorKind.UNAUTHENTICATED:
                error = ClassifiedError(kind, backend_message or translate("unauthenticated", lang), status=status)
            case ErrorKind.SESSION_EXPIRED_CSRF:
                error = ClassifiedError(kind, translate("csrf_expired", lang), status=status)
            case ErrorKind.VALIDATION_FAILED:
                field_errors = _field_errors(body.get("errors"))
                flat = [message for messages in field_errors.values() for message in messages]
                error = ClassifiedError(
                    kind,
                    ", ".join(flat) if flat else fallback,
                    status=status,
                    field_errors=field_errors,
                )
            case ErrorKind.RATE_LIMITED:
                delay = self._config.rate_limit_delay.total_seconds()
                logger.warning("Rate limited, pausing once before surfacing", delay=delay)
                await self._sleep(delay)
                error = ClassifiedError(kind, translate("rate_limited", lang), status=status)
            case _:
                error = ClassifiedError(kind, fallback, status=status)

        logger.info("HTTP error", status=status, kind=kind.name, message=error.message)
        return error


def _field_errors(raw: object) -> dict[str, tuple[str, ...]]:
    """Normalize a ``{"field": ["msg", ...]}`` map; scalars become 1-tuples."""
    errors = as_mapping(raw)
    if errors is None:
        return {}

    normalized: dict[str, tuple[str, ...]] = {}
    for name, value in errors.items():
        if isinstance(value, str):
            normalized[str(name)] = (value,)
        elif isinstance(value, list | tuple):
            normalized[str(name)] = tuple(str(v) for v in value if v)
    return normalized


__all__ = ("Transport", "Sleep")
