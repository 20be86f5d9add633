from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID, uuid4

from cart_service.core.domain.model.money import Money


@dataclass(frozen=True)
class ProductId:
    value: UUID

    @staticmethod
    def new() -> "ProductId":
        return ProductId(uuid4())


@dataclass
class Product:
    product_id: ProductId
    name: str
    unit_price: Money
