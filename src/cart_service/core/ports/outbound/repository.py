from __future__ import annotations

from typing import Any, Protocol, TypeVar

from returns.result import Result

from cart_service.core.domain.model.errors import CartError

T = TypeVar("T")
T_contra = TypeVar("T_contra", contravariant=True)


class Specification(Protocol[T_contra]):
    def is_satisfied_by(self, candidate: T_contra) -> bool: ...


class Repository(Protocol[T]):
    """
    Entities returned by find_by_id / find_one are tracked by the unit of
    work open for the current operation: changes made to them, and entities
    passed to add, become durable only when that unit of work commits.
    """

    def find_by_id(self, entity_id: Any) -> Result[T | None, CartError]: ...

    def find_one(self, spec: Specification[T]) -> Result[T | None, CartError]: ...

    def add(self, entity: T) -> Result[None, CartError]: ...
