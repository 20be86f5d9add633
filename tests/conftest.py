from decimal import Decimal
from pathlib import Path

import pytest

from cart_service.bootstrap import build_stores
from cart_service.core.domain.model.customer import Customer, CustomerId
from cart_service.core.domain.model.money import Money
from cart_service.core.domain.model.product import Product, ProductId
from cart_service.core.domain.service.cart_service import CartDeps, CartService
from cart_service.core.domain.service.checkout_service import CheckoutService
from cart_service.core.domain.service.tax_service import TaxService


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))
        for marker in ("domain", "application", "adapters", "integration"):
            if f"/{marker}/" in test_path:
                item.add_marker(getattr(pytest.mark, marker))


class FakeClock:
    """Manually driven monotonic clock, in seconds."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TickingClock:
    """Moves forward by a fixed step every time it is read."""

    def __init__(self, step_seconds: float):
        self.step = step_seconds
        self.now = -step_seconds

    def __call__(self) -> float:
        self.now += self.step
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def stores():
    return build_stores()


@pytest.fixture
def tax():
    return TaxService(default_rate=Decimal("0.10"), rates_by_country={"US": Decimal("0.07")})


@pytest.fixture
def customer(stores):
    c = Customer(customer_id=CustomerId.new(), name="Aiko Tanaka", country="JP")
    stores.customers.seed(c)
    return c


@pytest.fixture
def notebook(stores):
    p = Product(product_id=ProductId.new(), name="Notebook", unit_price=Money.of("1000.00"))
    stores.products.seed(p)
    return p


@pytest.fixture
def pen(stores):
    p = Product(product_id=ProductId.new(), name="Pen", unit_price=Money.of("250.00"))
    stores.products.seed(p)
    return p


@pytest.fixture
def make_service(stores, tax, clock):
    def _make(timeout_ms=5000, clock=clock, **overrides):
        deps = dict(
            customers=stores.customers,
            products=stores.products,
            carts=stores.carts,
            unit_of_work=stores.unit_of_work,
            tax=tax,
            checkout=CheckoutService(purchases=stores.purchases),
            timeout_ms=timeout_ms,
            clock=clock,
        )
        deps.update(overrides)
        return CartService(CartDeps(**deps))

    return _make


@pytest.fixture
def service(make_service):
    return make_service()


@pytest.fixture
def ticking_clock():
    return TickingClock
