from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from returns.result import Result

from cart_service.core.domain.model.cart import CartId
from cart_service.core.domain.model.customer import CustomerId
from cart_service.core.domain.model.errors import CartError
from cart_service.core.domain.model.money import Money
from cart_service.core.domain.model.product import ProductId
from cart_service.core.domain.model.purchase import CheckOutIssue, PurchaseId


@dataclass(frozen=True)
class CartProductInput:
    product_id: str  # UUID string
    quantity: int


@dataclass(frozen=True)
class CartLineSnapshot:
    product_id: ProductId
    quantity: int


@dataclass(frozen=True)
class CartSnapshot:
    cart_id: CartId
    customer_id: CustomerId
    lines: Sequence[CartLineSnapshot]


@dataclass(frozen=True)
class CheckOutResult:
    """Either a completed purchase or the issue that blocked checkout, never both."""

    purchase_id: PurchaseId | None = None
    total: Money | None = None
    issue: CheckOutIssue | None = None

    def __post_init__(self) -> None:
        if (self.purchase_id is None) == (self.issue is None):
            raise ValueError("exactly one of purchase_id or issue must be set")

    @staticmethod
    def blocked(issue: CheckOutIssue) -> "CheckOutResult":
        return CheckOutResult(issue=issue)

    @property
    def succeeded(self) -> bool:
        return self.purchase_id is not None


class CartUseCase(Protocol):
    def add(
        self, customer_id: str, item: CartProductInput
    ) -> Result[CartSnapshot, CartError]: ...

    def remove(
        self, customer_id: str, product_id: str
    ) -> Result[CartSnapshot, CartError]: ...

    def get(self, customer_id: str) -> Result[CartSnapshot, CartError]: ...

    def check_out(self, customer_id: str) -> Result[CheckOutResult, CartError]: ...
