"""
Checkout Example — cart refetch, double-click protection, order success.

Run: uv run python examples/checkout_example.py
"""

import asyncio
import json

import httpx
import structlog
from kungfu import Ok, Error

from cartsync import ClientConfig, Storefront
from cartsync.orders import Notification
from cartsync.session import TOKEN_KEY, MemoryStore


# ═══════════════════════════════════════════════════════════════════════════════
# Backend
# ═══════════════════════════════════════════════════════════════════════════════

lines: dict[int, int] = {}
prices = {1: 120, 2: 45}
orders_created = 0


async def backend(request: httpx.Request) -> httpx.Response:
    """Just enough of the storefront API for the demo."""
    global orders_created
    path = request.url.path.removeprefix("/api/v1")
    body = json.loads(request.content) if request.content else {}

    match request.method, path:
        case "GET", "/cart":
            items = [
                {"product_id": pid, "quantity": qty, "unit_price": prices[pid]}
                for pid, qty in lines.items()
            ]
            return httpx.Response(200, json={"success": True, "data": {"cart": {"items": items}}})
        case "POST", "/cart/add":
            pid = body["product_id"]
            lines[pid] = lines.get(pid, 0) + body["quantity"]
            return httpx.Response(200, json={"success": True})
        case "DELETE", "/cart/clear":
            lines.clear()
            return httpx.Response(200, json={"success": True})
        case "POST", "/orders":
            orders_created += 1
            await asyncio.sleep(0.2)
            order = {"id": 77, "order_number": "ORD-77", "total_amount": 335}
            return httpx.Response(201, json={"success": True, "data": {"order": order}})
        case _:
            return httpx.Response(404, json={"message": "Not Found"})


# ═══════════════════════════════════════════════════════════════════════════════
# UI ports
# ═══════════════════════════════════════════════════════════════════════════════


class PrintNotifier:
    def notify(self, notification: Notification) -> None:
        print(f"   [{notification.kind.value}] {notification.title}: {notification.message!r}")


class PrintNavigator:
    def navigate(self, route: str) -> None:
        print(f"   [navigate] {route}")


# ═══════════════════════════════════════════════════════════════════════════════
# Demo
# ═══════════════════════════════════════════════════════════════════════════════


def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


async def main() -> None:
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(30))
    banner("Checkout")

    config = (
        ClientConfig()
        .with_base_url("http://shop.local/api/v1")
        .with_default_lang("en")
        .with_navigation_delay(seconds=0.5)
    )
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend), base_url=config.base_url)
    store = MemoryStore({TOKEN_KEY: "demo-token"})

    async with Storefront.open(
        config, store, notifier=PrintNotifier(), navigator=PrintNavigator(), client=client
    ) as shop:
        # 1. Every mutation refetches the server cart
        print("\n1. Add to cart:")
        await shop.cart.add_line(1, 2)
        await shop.cart.add_line(2, 1)
        print(f"   items={shop.cart.items_count}, total={shop.cart.total} {config.currency}")

        # 2. Double click — the second submit never reaches the server
        print("\n2. Double-click submit:")
        address = shop.checkout.form.address
        address.name, address.phone = "Omar", "01000000000"
        address.governorate, address.city, address.street = "Cairo", "Nasr City", "Makram Ebeid"

        first, second = await asyncio.gather(shop.checkout.submit(), shop.checkout.submit())
        for label, result in (("first", first), ("second", second)):
            match result:
                case Ok(ack):
                    print(f"   {label}: order {ack.order_number}")
                case Error(e):
                    print(f"   {label}: {e.kind.name}")

        await asyncio.sleep(0.6)

    await client.aclose()
    print(f"\nSummary: {orders_created} order(s) created for 2 clicks")


if __name__ == "__main__":
    asyncio.run(main())
