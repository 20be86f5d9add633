from __future__ import annotations

from cart_service.core.domain.model.cart import Cart
from cart_service.core.domain.model.purchase import Purchase
from cart_service.core.ports.inbound.cart import (
    CartLineSnapshot,
    CartSnapshot,
    CheckOutResult,
)


def cart_to_snapshot(cart: Cart) -> CartSnapshot:
    # lines keep the order stored in the cart
    return CartSnapshot(
        cart_id=cart.cart_id,
        customer_id=cart.customer_id,
        lines=tuple(
            CartLineSnapshot(product_id=ln.product_id, quantity=ln.quantity)
            for ln in cart.lines
        ),
    )


def purchase_to_result(purchase: Purchase) -> CheckOutResult:
    return CheckOutResult(purchase_id=purchase.purchase_id, total=purchase.total())
