from datetime import datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from rest_framework.test import APIClient

from modules.orders.constants import OrderStatus
from modules.orders.dtos import Order
from modules.orders.services import OrderLifecycleService
from shared.infrastructure.bus import InMemoryEventBus

FIXED_NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)
ORDER_ID = UUID("0190a4c2-7b3e-7c61-9d2f-5a8e4b1c0d11")


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def make_order():
    """Factory for orders at any stage; defaults to a new 65000 order."""

    def _make(**overrides) -> Order:
        data = {
            "id": ORDER_ID,
            "order_number": "1042",
            "status": OrderStatus.NEW,
            "final_price": Decimal("65000"),
        }
        data.update(overrides)
        return Order(**data)

    return _make


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def clock():
    return fixed_clock


@pytest.fixture()
def bus():
    return InMemoryEventBus()


@pytest.fixture()
def service(bus):
    return OrderLifecycleService(event_bus=bus, clock=fixed_clock)


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()
