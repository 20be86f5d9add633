from __future__ import annotations

from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from types import TracebackType
from typing import Any, Callable, Dict, Hashable, Optional, Tuple, Type

from returns.result import Failure, Result, Success

from cart_service.core.domain.model.errors import CartError, PersistenceError
from cart_service.core.ports.outbound.unit_of_work import UnitOfWork

Write = Callable[[], None]

_active: ContextVar[Optional["InMemoryUnitOfWork"]] = ContextVar(
    "active_in_memory_unit_of_work", default=None
)


def active_unit_of_work() -> Optional["InMemoryUnitOfWork"]:
    return _active.get()


@dataclass
class InMemoryUnitOfWorkFactory:
    """Opens one InMemoryUnitOfWork per operation.

    Counters and the ``fail`` switch are shared by every unit it opens.
    """

    fail: bool = False
    commits: int = 0
    rollbacks: int = 0

    def __call__(self) -> "InMemoryUnitOfWork":
        return InMemoryUnitOfWork(factory=self)


@dataclass
class InMemoryUnitOfWork(UnitOfWork):
    """Stages writes from in-memory repositories until commit.

    While the block is open this unit is the active one for the current
    context, so repositories stage into it. Nested units shadow the outer one
    and restore it on exit.

    Staged writes are keyed by (store, entity key), so the latest tracked copy
    of an entity wins.
    """

    factory: InMemoryUnitOfWorkFactory
    _staged: Dict[Tuple[int, Hashable], Write] = field(default_factory=dict)
    _token: Optional[Token] = None

    def __enter__(self) -> "InMemoryUnitOfWork":
        self._token = _active.set(self)
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if self._staged:
            self.rollback()
        if self._token is not None:
            _active.reset(self._token)
            self._token = None

    def stage(self, store: Any, key: Hashable, write: Write) -> None:
        self._staged[(id(store), key)] = write

    @property
    def has_pending(self) -> bool:
        return bool(self._staged)

    def commit(self) -> Result[None, CartError]:
        if self.factory.fail:
            return Failure(PersistenceError(message="commit failed"))
        for write in self._staged.values():
            write()
        self._staged.clear()
        self.factory.commits += 1
        return Success(None)

    def rollback(self) -> Result[None, CartError]:
        self._staged.clear()
        self.factory.rollbacks += 1
        return Success(None)
