from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping

from cart_service.core.domain.model.customer import Customer
from cart_service.core.domain.model.money import Money
from cart_service.core.domain.model.product import Product


@dataclass(frozen=True)
class TaxService:
    """Tax owed on a cart line, by the customer's country."""

    default_rate: Decimal = Decimal("0.10")
    rates_by_country: Mapping[str, Decimal] = field(default_factory=dict)

    def rate_for(self, customer: Customer) -> Decimal:
        return self.rates_by_country.get(customer.country.upper(), self.default_rate)

    def calculate(self, customer: Customer, product: Product, quantity: int) -> Money:
        return (product.unit_price * quantity).scale(self.rate_for(customer))
