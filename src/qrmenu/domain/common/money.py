from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

_CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Price:
    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", Decimal(str(self.amount)))
        if not self.amount.is_finite():
            raise ValueError("price must be a finite number")
        if self.amount < 0:
            raise ValueError("price must be >= 0")
        object.__setattr__(self, "amount", self.amount.quantize(_CENTS, rounding=ROUND_HALF_UP))

    def as_float(self) -> float:
        return float(self.amount)
