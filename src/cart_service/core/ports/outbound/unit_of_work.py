from __future__ import annotations

from types import TracebackType
from typing import Callable, Optional, Protocol, Type

from returns.result import Result

from cart_service.core.domain.model.errors import CartError


class UnitOfWork(Protocol):
    """One operation's worth of loads and writes.

    Used as a context manager. Leaving the block without a commit discards
    whatever the operation staged.
    """

    def __enter__(self) -> "UnitOfWork": ...

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None: ...

    def commit(self) -> Result[None, CartError]:
        """Flush every pending add and mutation as one unit."""
        ...

    def rollback(self) -> Result[None, CartError]: ...


# opens a fresh unit of work per operation
UnitOfWorkFactory = Callable[[], UnitOfWork]
