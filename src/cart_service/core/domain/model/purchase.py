from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Tuple
from uuid import UUID, uuid4

from cart_service.core.domain.model.cart import CartLine
from cart_service.core.domain.model.customer import CustomerId
from cart_service.core.domain.model.money import Money, fold_money


@dataclass(frozen=True)
class PurchaseId:
    value: UUID

    @staticmethod
    def new() -> "PurchaseId":
        return PurchaseId(uuid4())


class CheckOutIssue(str, Enum):
    EMPTY_CART = "empty_cart"
    ACCOUNT_SUSPENDED = "account_suspended"
    UNPAID_BALANCE = "unpaid_balance"


@dataclass(frozen=True)
class Purchase:
    purchase_id: PurchaseId
    customer_id: CustomerId
    lines: Tuple[CartLine, ...]
    created_at: datetime

    def total(self) -> Money:
        currency = self.lines[0].unit_price.currency if self.lines else "JPY"
        return fold_money((ln.total() for ln in self.lines), currency=currency)
