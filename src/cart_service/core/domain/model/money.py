from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = "JPY"

    @staticmethod
    def of(amount: Decimal | int | str, currency: str = "JPY") -> "Money":
        dec = Decimal(str(amount)).quantize(_CENTS, rounding=ROUND_HALF_UP)
        return Money(dec, currency)

    @staticmethod
    def zero(currency: str = "JPY") -> "Money":
        return Money.of(0, currency=currency)

    def __add__(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, n: int) -> "Money":
        return Money(
            (self.amount * Decimal(n)).quantize(_CENTS, rounding=ROUND_HALF_UP),
            self.currency,
        )

    def scale(self, rate: Decimal) -> "Money":
        return Money(
            (self.amount * rate).quantize(_CENTS, rounding=ROUND_HALF_UP),
            self.currency,
        )

    def is_positive(self) -> bool:
        return self.amount > 0

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise ValueError(f"currency_mismatch: {self.currency} vs {other.currency}")


def fold_money(values: Iterable[Money], currency: str = "JPY") -> Money:
    total = Money.zero(currency)
    for v in values:
        total = total + v
    return total


def now_utc() -> datetime:
    return datetime.now(timezone.utc)
