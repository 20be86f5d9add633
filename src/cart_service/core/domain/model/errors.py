from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartError(Exception):
    message: str

    def __str__(self) -> str:  # pragma: no cover
        return self.message


@dataclass(frozen=True)
class ValidationError(CartError):
    pass


@dataclass(frozen=True)
class CustomerNotFound(CartError):
    customer_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"customer_not_found: {self.customer_id} ({self.message})"


@dataclass(frozen=True)
class CartNotFound(CustomerNotFound):
    """No cart exists for an otherwise valid customer id.

    Derives from CustomerNotFound so callers matching the older, coarser
    error kind keep working.
    """

    def __str__(self) -> str:  # pragma: no cover
        return f"cart_not_found: customer={self.customer_id} ({self.message})"


@dataclass(frozen=True)
class ProductNotFound(CartError):
    product_id: str

    def __str__(self) -> str:  # pragma: no cover
        return f"product_not_found: {self.product_id} ({self.message})"


@dataclass(frozen=True)
class OperationTimedOut(CartError):
    elapsed_ms: float
    limit_ms: int

    def __str__(self) -> str:  # pragma: no cover
        return (
            f"operation_timed_out: {self.elapsed_ms:.0f}ms > {self.limit_ms}ms "
            f"({self.message})"
        )


@dataclass(frozen=True)
class PersistenceError(CartError):
    pass
