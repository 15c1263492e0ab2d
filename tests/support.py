from __future__ import annotations

from typing import Any

import pytest
from kungfu import Error, Ok

from cartsync.orders import OrderSubmissionCoordinator


def expect_ok(result: object) -> Any:
    match result:
        case Ok(value):
            return value
        case _:
            pytest.fail(f"expected Ok, got {result!r}")


def expect_error(result: object) -> Any:
    match result:
        case Error(e):
            return e
        case _:
            pytest.fail(f"expected an error, got {result!r}")


def fill_address(coordinator: OrderSubmissionCoordinator, **overrides: str) -> None:
    address = coordinator.form.address
    address.name = "Omar Hassan"
    address.phone = "01000000000"
    address.governorate = "Cairo"
    address.city = "Nasr City"
    address.street = "Abbas El Akkad"
    for name, value in overrides.items():
        setattr(address, name, value)
