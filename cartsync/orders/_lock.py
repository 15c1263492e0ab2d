"""
Submission lock — synchronous check-and-set guard.
"""

from __future__ import annotations


class SubmissionLock:
    """
    Per-session exclusive guard for order creation.

    Note: try_acquire() never suspends. A second trigger on the same loop
    sees the flag set by the first before either reaches a network await.
    There is no waiting acquire.

    Example:
        if not lock.try_acquire():
            return busy()
        try:
            ...
        finally:
            lock.release()
    """

    __slots__ = ("_held",)

    def __init__(self) -> None:
        self._held = False

    @property
    def held(self) -> bool:
        return self._held

    def try_acquire(self) -> bool:
        if self._held:
            return False
        self._held = True
        return True

    def release(self) -> None:
        self._held = False


__all__ = ("SubmissionLock",)
