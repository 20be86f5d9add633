from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from cart_service.adapters.outbound.in_memory_repository import InMemoryRepository
from cart_service.adapters.outbound.in_memory_unit_of_work import InMemoryUnitOfWorkFactory
from cart_service.config import Settings, get_settings
from cart_service.core.domain.model.cart import Cart
from cart_service.core.domain.model.customer import Customer, CustomerId
from cart_service.core.domain.model.money import Money
from cart_service.core.domain.model.product import Product, ProductId
from cart_service.core.domain.model.purchase import Purchase
from cart_service.core.domain.service.cart_service import CartDeps, CartService
from cart_service.core.domain.service.checkout_service import CheckoutService
from cart_service.core.domain.service.tax_service import TaxService

DEMO_CUSTOMER_ID = UUID("00000000-0000-4000-8000-000000000001")
DEMO_PRODUCT_IDS = (
    UUID("00000000-0000-4000-8000-0000000000a1"),
    UUID("00000000-0000-4000-8000-0000000000a2"),
)


@dataclass(frozen=True)
class Stores:
    unit_of_work: InMemoryUnitOfWorkFactory
    customers: InMemoryRepository[Customer]
    products: InMemoryRepository[Product]
    carts: InMemoryRepository[Cart]
    purchases: InMemoryRepository[Purchase]


@dataclass(frozen=True)
class UseCases:
    cart: CartService
    stores: Stores


def build_stores() -> Stores:
    return Stores(
        unit_of_work=InMemoryUnitOfWorkFactory(),
        customers=InMemoryRepository(key_of=lambda c: c.customer_id),
        products=InMemoryRepository(key_of=lambda p: p.product_id),
        carts=InMemoryRepository(key_of=lambda c: c.cart_id),
        purchases=InMemoryRepository(key_of=lambda p: p.purchase_id),
    )


def seed_demo_data(stores: Stores, currency: str) -> None:
    stores.customers.seed(
        Customer(customer_id=CustomerId(DEMO_CUSTOMER_ID), name="Demo Customer", country="JP")
    )
    stores.products.seed(
        Product(
            product_id=ProductId(DEMO_PRODUCT_IDS[0]),
            name="Notebook",
            unit_price=Money.of("1200.00", currency),
        ),
        Product(
            product_id=ProductId(DEMO_PRODUCT_IDS[1]),
            name="Fountain pen",
            unit_price=Money.of("3500.00", currency),
        ),
    )


def build_usecases(settings: Settings | None = None) -> UseCases:
    settings = settings or get_settings()
    stores = build_stores()
    if settings.seed_demo_data:
        seed_demo_data(stores, settings.currency)

    tax = TaxService(
        default_rate=settings.default_tax_rate,
        rates_by_country={k.upper(): v for k, v in settings.tax_rates.items()},
    )
    cart = CartService(
        CartDeps(
            customers=stores.customers,
            products=stores.products,
            carts=stores.carts,
            unit_of_work=stores.unit_of_work,
            tax=tax,
            checkout=CheckoutService(purchases=stores.purchases),
            timeout_ms=settings.operation_timeout_ms,
        )
    )
    return UseCases(cart=cart, stores=stores)
