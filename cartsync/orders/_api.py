"""
Order endpoints — thin wrappers over the transport.
"""

from __future__ import annotations

from kungfu import Result

from cartsync._types import Payload
from cartsync.transport import ClassifiedError, Transport


class OrdersApi:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def create_order(self, payload: Payload) -> Result[Payload, ClassifiedError]:
        return await self._transport.post("/orders", payload)

    async def list_orders(
        self,
        *,
        page: int | None = None,
        per_page: int | None = None,
        status: str | None = None,
    ) -> Result[Payload, ClassifiedError]:
        """List the principal's orders. None filters are left out of the query."""
        return await self._transport.get(
            "/orders",
            query={"page": page, "per_page": per_page, "status": status},
        )

    async def get_order(self, order_id: int | str) -> Result[Payload, ClassifiedError]:
        return await self._transport.get(f"/orders/{order_id}")

    async def track_order(self, order_id: int | str) -> Result[Payload, ClassifiedError]:
        return await self._transport.get(f"/orders/{order_id}/tracking")

    async def cancel_order(self, order_id: int | str, reason: str | None = None) -> Result[Payload, ClassifiedError]:
        body = {"reason": reason} if reason else None
        return await self._transport.put(f"/orders/{order_id}/cancel", body)


__all__ = ("OrdersApi",)
