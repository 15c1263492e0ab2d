"""
Logging helpers — header redaction for HTTP diagnostics.

Modules log through ``structlog.get_logger(__name__)``; configuration of
processors and renderers is left to the host application.
"""

from __future__ import annotations

from collections.abc import Mapping

_SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "x-csrf-token"})


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy headers with credentials masked."""
    redacted: dict[str, str] = {}
    for name, value in headers.items():
        lowered = name.lower()
        if lowered == "authorization" and value.lower().startswith("bearer "):
            redacted[name] = "Bearer ***"
        elif lowered in _SENSITIVE_HEADERS:
            redacted[name] = "***"
        else:
            redacted[name] = value
    return redacted


__all__ = ("redact_headers",)
