"""
Transport error taxonomy.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto


class ErrorKind(Enum):
    """
    Closed classification of transport failures.

    HTTP-derived:
        UNAUTHENTICATED        401 — caller clears token, prompts re-login
        FORBIDDEN              403 — token untouched
        SESSION_EXPIRED_CSRF   419 — refresh / re-authenticate
        VALIDATION_FAILED      422 — field messages concatenated
        RATE_LIMITED           429 — surfaced after one fixed delay
        GENERIC                any other non-2xx

    Body-derived:
        UNEXPECTED_CONTENT_TYPE  response is not JSON

    Connection-derived:
        NETWORK                connect/read failure, timeout
    """

    UNAUTHENTICATED = auto()
    FORBIDDEN = auto()
    SESSION_EXPIRED_CSRF = auto()
    VALIDATION_FAILED = auto()
    RATE_LIMITED = auto()
    UNEXPECTED_CONTENT_TYPE = auto()
    GENERIC = auto()
    NETWORK = auto()


_STATUS_KINDS: Mapping[int, ErrorKind] = {
    401: ErrorKind.UNAUTHENTICATED,
    403: ErrorKind.FORBIDDEN,
    419: ErrorKind.SESSION_EXPIRED_CSRF,
    422: ErrorKind.VALIDATION_FAILED,
    429: ErrorKind.RATE_LIMITED,
}


def kind_for_status(status: int) -> ErrorKind:
    return _STATUS_KINDS.get(status, ErrorKind.GENERIC)


@dataclass(frozen=True, slots=True)
class ClassifiedError:
    """
    Transport failure with everything a caller needs to react.

    Note: status is None for NETWORK errors and for bodies that never
    reached status classification.
    """

    kind: ErrorKind
    message: str
    status: int | None = None
    field_errors: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    body_preview: str | None = None

    @property
    def is_auth_failure(self) -> bool:
        return self.kind is ErrorKind.UNAUTHENTICATED

    def __str__(self) -> str:
        return self.message


__all__ = (
    "ErrorKind",
    "ClassifiedError",
    "kind_for_status",
)
