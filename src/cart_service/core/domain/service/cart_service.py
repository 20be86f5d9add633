from __future__ import annotations

import time
from dataclasses import dataclass
from functools import partial
from typing import Tuple, TypeVar
from uuid import UUID

import structlog
from returns.pipeline import flow
from returns.pointfree import bind, map_
from returns.result import Failure, Result, Success

from cart_service.core.domain.model.cart import (
    Cart,
    CustomerCartSpec,
    create_cart_line,
)
from cart_service.core.domain.model.customer import Customer, CustomerId
from cart_service.core.domain.model.errors import (
    CartError,
    CartNotFound,
    CustomerNotFound,
    ProductNotFound,
    ValidationError,
)
from cart_service.core.domain.model.product import Product, ProductId
from cart_service.core.domain.service.cart_mapping import (
    cart_to_snapshot,
    purchase_to_result,
)
from cart_service.core.domain.service.checkout_service import CheckoutService
from cart_service.core.domain.service.tax_service import TaxService
from cart_service.core.domain.service.timeout import Clock, StepTimer
from cart_service.core.ports.inbound.cart import (
    CartProductInput,
    CartSnapshot,
    CartUseCase,
    CheckOutResult,
)
from cart_service.core.ports.outbound.repository import Repository
from cart_service.core.ports.outbound.unit_of_work import UnitOfWork, UnitOfWorkFactory

logger = structlog.get_logger(__name__)

_T = TypeVar("_T")


@dataclass(frozen=True)
class CartDeps:
    customers: Repository[Customer]
    products: Repository[Product]
    carts: Repository[Cart]
    unit_of_work: UnitOfWorkFactory
    tax: TaxService
    checkout: CheckoutService
    timeout_ms: int = 5000
    clock: Clock = time.monotonic


@dataclass(frozen=True)
class CartService(CartUseCase):
    """Cart operations, each run inside its own unit of work.

    A failing step rolls the unit back and returns its Failure; nothing it
    staged reaches the stores.
    """

    deps: CartDeps

    def add(
        self, customer_id: str, item: CartProductInput
    ) -> Result[CartSnapshot, CartError]:
        timer = self._start_timer()

        with self.deps.unit_of_work() as uow:
            v = _parse_ids(customer_id, item.product_id)
            if isinstance(v, Failure):
                return self._failed(uow, "add", customer_id, v)
            cid, pid = v.unwrap()

            found_customer = self._load_customer(cid).bind(timer.check)
            if isinstance(found_customer, Failure):
                return self._failed(uow, "add", customer_id, found_customer)
            customer = found_customer.unwrap()

            quantity = _validate_quantity(item.quantity)
            if isinstance(quantity, Failure):
                return self._failed(uow, "add", customer_id, quantity)

            found_cart = self._find_or_create_cart(customer).bind(timer.check)
            if isinstance(found_cart, Failure):
                return self._failed(uow, "add", customer_id, found_cart)
            cart = found_cart.unwrap()

            found_product = self._load_product(pid).bind(
                lambda product: _priced_like(cart, product)
            )
            if isinstance(found_product, Failure):
                return self._failed(uow, "add", customer_id, found_product)
            product = found_product.unwrap()

            cart.add(
                create_cart_line(customer, cart, product, item.quantity, self.deps.tax)
            )

            result = flow(
                timer.check(cart),
                bind(partial(_commit, uow)),
                map_(cart_to_snapshot),
            )
            if isinstance(result, Failure):
                return self._failed(uow, "add", customer_id, result)

        logger.info(
            "cart.item_added",
            customer_id=customer_id,
            product_id=item.product_id,
            quantity=item.quantity,
            elapsed_ms=round(timer.elapsed_ms(), 1),
        )
        return result

    def remove(
        self, customer_id: str, product_id: str
    ) -> Result[CartSnapshot, CartError]:
        timer = self._start_timer()

        with self.deps.unit_of_work() as uow:
            v = _parse_ids(customer_id, product_id)
            if isinstance(v, Failure):
                return self._failed(uow, "remove", customer_id, v)
            cid, pid = v.unwrap()

            found_cart = self._find_cart(cid).bind(timer.check)
            if isinstance(found_cart, Failure):
                return self._failed(uow, "remove", customer_id, found_cart)
            cart = found_cart.unwrap()

            found_product = self._load_product(pid).bind(timer.check)
            if isinstance(found_product, Failure):
                return self._failed(uow, "remove", customer_id, found_product)
            product = found_product.unwrap()

            cart.remove(product.product_id)

            result = flow(
                _commit(uow, cart),
                bind(timer.check),
                map_(cart_to_snapshot),
            )
            if isinstance(result, Failure):
                return self._failed(uow, "remove", customer_id, result)

        logger.info(
            "cart.item_removed",
            customer_id=customer_id,
            product_id=product_id,
            elapsed_ms=round(timer.elapsed_ms(), 1),
        )
        return result

    def get(self, customer_id: str) -> Result[CartSnapshot, CartError]:
        timer = self._start_timer()

        with self.deps.unit_of_work() as uow:
            result = flow(
                _parse_customer_id(customer_id),
                bind(self._find_cart),
                bind(timer.check),
                map_(cart_to_snapshot),
            )
            if isinstance(result, Failure):
                return self._failed(uow, "get", customer_id, result)
            # read only: nothing loaded here may be written back
            _ = uow.rollback()
        return result

    def check_out(self, customer_id: str) -> Result[CheckOutResult, CartError]:
        timer = self._start_timer()

        with self.deps.unit_of_work() as uow:
            found_cart = flow(
                _parse_customer_id(customer_id),
                bind(self._find_cart),
                bind(timer.check),
            )
            if isinstance(found_cart, Failure):
                return self._failed(uow, "check_out", customer_id, found_cart)
            cart: Cart = found_cart.unwrap()

            # the cart's own customer reference must still resolve
            found_customer = self._load_customer(cart.customer_id).bind(timer.check)
            if isinstance(found_customer, Failure):
                return self._failed(uow, "check_out", customer_id, found_customer)
            customer = found_customer.unwrap()

            issue = self.deps.checkout.can_check_out(customer, cart)
            if issue is not None:
                _ = uow.rollback()
                logger.info(
                    "cart.checkout_blocked", customer_id=customer_id, issue=issue.value
                )
                return Success(CheckOutResult.blocked(issue))

            result = flow(
                self.deps.checkout.check_out(customer, cart),
                bind(partial(_commit, uow)),
                bind(timer.check),
                map_(purchase_to_result),
            )
            if isinstance(result, Failure):
                return self._failed(uow, "check_out", customer_id, result)

        checked_out: CheckOutResult = result.unwrap()
        logger.info(
            "cart.checked_out",
            customer_id=customer_id,
            purchase_id=str(checked_out.purchase_id.value),
            total=str(checked_out.total.amount),
            elapsed_ms=round(timer.elapsed_ms(), 1),
        )
        return result

    # ---- steps -------------------------------------------------------------

    def _start_timer(self) -> StepTimer:
        return StepTimer.start(self.deps.timeout_ms, clock=self.deps.clock)

    def _load_customer(self, cid: CustomerId) -> Result[Customer, CartError]:
        return self.deps.customers.find_by_id(cid).bind(
            lambda customer: _present(
                customer,
                CustomerNotFound(
                    message="customer was not found", customer_id=str(cid.value)
                ),
            )
        )

    def _load_product(self, pid: ProductId) -> Result[Product, CartError]:
        return self.deps.products.find_by_id(pid).bind(
            lambda product: _present(
                product,
                ProductNotFound(
                    message="product was not found", product_id=str(pid.value)
                ),
            )
        )

    def _find_cart(self, cid: CustomerId) -> Result[Cart, CartError]:
        return self.deps.carts.find_one(CustomerCartSpec(cid)).bind(
            lambda cart: _present(
                cart,
                CartNotFound(
                    message="no cart exists for customer", customer_id=str(cid.value)
                ),
            )
        )

    def _find_or_create_cart(self, customer: Customer) -> Result[Cart, CartError]:
        return self.deps.carts.find_one(CustomerCartSpec(customer.customer_id)).bind(
            lambda cart: Success(cart) if cart is not None else self._new_cart(customer)
        )

    def _new_cart(self, customer: Customer) -> Result[Cart, CartError]:
        cart = Cart.create(customer)
        logger.info(
            "cart.created",
            customer_id=str(customer.customer_id.value),
            cart_id=str(cart.cart_id.value),
        )
        return self.deps.carts.add(cart).map(lambda _: cart)

    def _failed(
        self, uow: UnitOfWork, operation: str, customer_id: str, result: Result
    ) -> Result:
        err = result.failure()
        _ = uow.rollback()
        logger.warning(
            "cart.operation_failed",
            operation=operation,
            customer_id=customer_id,
            error=type(err).__name__,
            reason=str(err),
        )
        return result


def _commit(uow: UnitOfWork, value: _T) -> Result[_T, CartError]:
    return uow.commit().map(lambda _: value)


# ---- pure helpers ----------------------------------------------------------


def _present(entity: _T | None, err: CartError) -> Result[_T, CartError]:
    if entity is None:
        return Failure(err)
    return Success(entity)


def _parse_uuid(raw: str, field_name: str) -> Result[UUID, CartError]:
    try:
        return Success(UUID(raw))
    except (AttributeError, TypeError, ValueError):
        return Failure(ValidationError(message=f"{field_name} must be a valid UUID"))


def _parse_customer_id(raw: str) -> Result[CustomerId, CartError]:
    return _parse_uuid(raw, "customer_id").map(CustomerId)


def _parse_product_id(raw: str) -> Result[ProductId, CartError]:
    return _parse_uuid(raw, "product_id").map(ProductId)


def _parse_ids(
    customer_id: str, product_id: str
) -> Result[Tuple[CustomerId, ProductId], CartError]:
    return _parse_customer_id(customer_id).bind(
        lambda cid: _parse_product_id(product_id).map(lambda pid: (cid, pid))
    )


def _validate_quantity(quantity: int) -> Result[int, CartError]:
    if quantity <= 0:
        return Failure(ValidationError(message="quantity must be > 0"))
    return Success(quantity)


def _priced_like(cart: Cart, product: Product) -> Result[Product, CartError]:
    if cart.currency is not None and product.unit_price.currency != cart.currency:
        return Failure(
            ValidationError(
                message=(
                    f"product is priced in {product.unit_price.currency}, "
                    f"cart is in {cart.currency}"
                )
            )
        )
    return Success(product)
