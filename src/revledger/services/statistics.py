"""Summary statistics over a dense rolling-year series."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from ..domain.templates import RevenueDisplayEntity


@dataclass(frozen=True)
class RevenueStatistics:
    total: int = 0
    average: int = 0
    minimum: int = 0
    maximum: int = 0
    months_with_data: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def calculate_statistics(entries: Iterable[RevenueDisplayEntity]) -> RevenueStatistics:
    """Total over every month; min/max/average over months with non-zero revenue.

    An all-zero series yields all-zero statistics (minimum is 0, not undefined).
    """

    amounts = [entry.total_amount for entry in entries]
    total = sum(amounts)
    with_data = [amount for amount in amounts if amount != 0]
    if not with_data:
        return RevenueStatistics(total=total)

    average = (Decimal(total) / Decimal(len(with_data))).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return RevenueStatistics(
        total=total,
        average=int(average),
        minimum=min(with_data),
        maximum=max(with_data),
        months_with_data=len(with_data),
    )
