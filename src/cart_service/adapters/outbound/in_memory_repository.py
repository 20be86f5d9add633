from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Tuple, TypeVar

from returns.result import Failure, Result, Success

from cart_service.adapters.outbound.in_memory_unit_of_work import active_unit_of_work
from cart_service.core.domain.model.errors import CartError, PersistenceError
from cart_service.core.ports.outbound.repository import Repository, Specification

T = TypeVar("T")


@dataclass
class InMemoryRepository(Repository[T]):
    """
    Loads hand out detached copies. Inside an open unit of work both loaded
    and added entities are staged in it and reach the store only when it
    commits; outside one, loads are untracked and adds are refused.
    """

    key_of: Callable[[T], Hashable]
    fail: bool = False
    _store: Dict[Hashable, T] = field(default_factory=dict)

    def seed(self, *entities: T) -> None:
        for e in entities:
            self._store[self.key_of(e)] = copy.deepcopy(e)

    def all(self) -> Tuple[T, ...]:
        return tuple(copy.deepcopy(e) for e in self._store.values())

    def __len__(self) -> int:
        return len(self._store)

    def find_by_id(self, entity_id: Any) -> Result[T | None, CartError]:
        if self.fail:
            return Failure(PersistenceError(message="store is unavailable"))
        stored = self._store.get(entity_id)
        if stored is None:
            return Success(None)
        return Success(self._track(copy.deepcopy(stored)))

    def find_one(self, spec: Specification[T]) -> Result[T | None, CartError]:
        if self.fail:
            return Failure(PersistenceError(message="store is unavailable"))
        stored = next((e for e in self._store.values() if spec.is_satisfied_by(e)), None)
        if stored is None:
            return Success(None)
        return Success(self._track(copy.deepcopy(stored)))

    def add(self, entity: T) -> Result[None, CartError]:
        if self.fail:
            return Failure(PersistenceError(message="store is unavailable"))
        if active_unit_of_work() is None:
            return Failure(PersistenceError(message="no active unit of work"))
        self._track(entity)
        return Success(None)

    def _track(self, entity: T) -> T:
        key = self.key_of(entity)

        def write() -> None:
            self._store[key] = copy.deepcopy(entity)

        uow = active_unit_of_work()
        if uow is not None:
            uow.stage(self._store, key, write)
        return entity
