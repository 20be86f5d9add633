from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, TypeVar

from returns.result import Failure, Result, Success

from cart_service.core.domain.model.errors import CartError, OperationTimedOut

Clock = Callable[[], float]  # seconds, monotonic

_V = TypeVar("_V")


@dataclass(frozen=True)
class StepTimer:
    """Elapsed-time guard checked between the steps of one operation.

    It never interrupts a step that is already running; it only refuses to
    go on once the limit has been passed.
    """

    clock: Clock
    limit_ms: int
    started_at: float

    @staticmethod
    def start(limit_ms: int, clock: Clock = time.monotonic) -> "StepTimer":
        return StepTimer(clock=clock, limit_ms=limit_ms, started_at=clock())

    def elapsed_ms(self) -> float:
        return (self.clock() - self.started_at) * 1000.0

    def check(self, value: _V) -> Result[_V, CartError]:
        elapsed = self.elapsed_ms()
        if elapsed > self.limit_ms:
            return Failure(
                OperationTimedOut(
                    message="operation took too long and timed out",
                    elapsed_ms=elapsed,
                    limit_ms=self.limit_ms,
                )
            )
        return Success(value)
