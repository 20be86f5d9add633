from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4

from cart_service.core.domain.model.money import Money


@dataclass(frozen=True)
class CustomerId:
    value: UUID

    @staticmethod
    def new() -> "CustomerId":
        return CustomerId(uuid4())


@dataclass
class Customer:
    customer_id: CustomerId
    name: str
    country: str
    unpaid_balance: Money = field(default_factory=Money.zero)
    suspended: bool = False
