from __future__ import annotations

from dataclasses import dataclass

from returns.result import Result

from cart_service.core.domain.model.cart import Cart
from cart_service.core.domain.model.customer import Customer
from cart_service.core.domain.model.errors import CartError
from cart_service.core.domain.model.money import now_utc
from cart_service.core.domain.model.purchase import CheckOutIssue, Purchase, PurchaseId
from cart_service.core.ports.outbound.repository import Repository


@dataclass(frozen=True)
class CheckoutService:
    purchases: Repository[Purchase]

    def can_check_out(self, customer: Customer, cart: Cart) -> CheckOutIssue | None:
        if customer.suspended:
            return CheckOutIssue.ACCOUNT_SUSPENDED
        if customer.unpaid_balance.is_positive():
            return CheckOutIssue.UNPAID_BALANCE
        if cart.is_empty:
            return CheckOutIssue.EMPTY_CART
        return None

    def check_out(self, customer: Customer, cart: Cart) -> Result[Purchase, CartError]:
        """Turn the cart into a purchase and empty it.

        The purchase is staged in the purchase repository; it becomes durable
        with the caller's commit.
        """
        purchase = Purchase(
            purchase_id=PurchaseId.new(),
            customer_id=customer.customer_id,
            lines=tuple(cart.lines),
            created_at=now_utc(),
        )
        cart.clear()
        return self.purchases.add(purchase).map(lambda _: purchase)
