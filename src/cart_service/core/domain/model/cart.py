from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List
from uuid import UUID, uuid4

from cart_service.core.domain.model.customer import Customer, CustomerId
from cart_service.core.domain.model.money import Money, fold_money
from cart_service.core.domain.model.product import Product, ProductId

if TYPE_CHECKING:
    from cart_service.core.domain.service.tax_service import TaxService


@dataclass(frozen=True)
class CartId:
    value: UUID

    @staticmethod
    def new() -> "CartId":
        return CartId(uuid4())


@dataclass(frozen=True)
class CartLine:
    product_id: ProductId
    quantity: int
    unit_price: Money
    tax: Money

    def subtotal(self) -> Money:
        return self.unit_price * self.quantity

    def total(self) -> Money:
        return self.subtotal() + self.tax

    def merged_with(self, other: "CartLine") -> "CartLine":
        return CartLine(
            product_id=self.product_id,
            quantity=self.quantity + other.quantity,
            unit_price=self.unit_price,
            tax=self.tax + other.tax,
        )


@dataclass
class Cart:
    cart_id: CartId
    customer_id: CustomerId
    lines: List[CartLine] = field(default_factory=list)

    @staticmethod
    def create(customer: Customer) -> "Cart":
        return Cart(cart_id=CartId.new(), customer_id=customer.customer_id)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def currency(self) -> str | None:
        return self.lines[0].unit_price.currency if self.lines else None

    def add(self, line: CartLine) -> None:
        """Add a line to the cart.

        A line for a product already in the cart is merged in place: the
        quantities and the taxes are summed and the line keeps its position.
        All lines share one currency; a line in another currency raises
        ValueError.
        """
        if self.currency is not None and line.unit_price.currency != self.currency:
            raise ValueError(
                f"currency_mismatch: {self.currency} vs {line.unit_price.currency}"
            )
        for i, existing in enumerate(self.lines):
            if existing.product_id == line.product_id:
                self.lines[i] = existing.merged_with(line)
                return
        self.lines.append(line)

    def remove(self, product_id: ProductId) -> None:
        # no-op when the product is not in the cart
        self.lines = [ln for ln in self.lines if ln.product_id != product_id]

    def clear(self) -> None:
        self.lines = []

    def total(self) -> Money:
        return fold_money((ln.total() for ln in self.lines), currency=self.currency or "JPY")


@dataclass(frozen=True)
class CustomerCartSpec:
    customer_id: CustomerId

    def is_satisfied_by(self, cart: Cart) -> bool:
        return cart.customer_id == self.customer_id


def create_cart_line(
    customer: Customer,
    cart: Cart,
    product: Product,
    quantity: int,
    tax_service: "TaxService",
) -> CartLine:
    if quantity <= 0:
        raise ValueError(f"quantity must be > 0, got {quantity}")
    if cart.customer_id != customer.customer_id:
        raise ValueError("cart does not belong to customer")
    return CartLine(
        product_id=product.product_id,
        quantity=quantity,
        unit_price=product.unit_price,
        tax=tax_service.calculate(customer, product, quantity),
    )
