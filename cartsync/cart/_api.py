"""
Cart endpoints — thin wrappers over the transport.
"""

from __future__ import annotations

from kungfu import Result

from cartsync._types import Payload
from cartsync.transport import ClassifiedError, Transport


class CartApi:
    """
    One method per cart route. No interpretation of the body.

    Example:
        api = CartApi(transport)
        result = await api.add(product_id=7, quantity=2)
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport

    async def get_cart(self) -> Result[Payload, ClassifiedError]:
        return await self._transport.get("/cart")

    async def add(self, product_id: int | str, quantity: int = 1) -> Result[Payload, ClassifiedError]:
        return await self._transport.post("/cart/add", {"product_id": product_id, "quantity": quantity})

    async def update(self, product_id: int | str, quantity: int) -> Result[Payload, ClassifiedError]:
        return await self._transport.put("/cart/update", {"product_id": product_id, "quantity": quantity})

    async def remove(self, product_id: int | str) -> Result[Payload, ClassifiedError]:
        return await self._transport.delete(f"/cart/remove/{product_id}")

    async def clear(self) -> Result[Payload, ClassifiedError]:
        return await self._transport.delete("/cart/clear")

    async def apply_coupon(self, code: str) -> Result[Payload, ClassifiedError]:
        return await self._transport.post("/cart/apply-coupon", {"coupon_code": code})

    async def remove_coupon(self) -> Result[Payload, ClassifiedError]:
        return await self._transport.post("/cart/remove-coupon")


__all__ = ("CartApi",)
