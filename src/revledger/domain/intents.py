"""Persistence intents emitted by the engine for a repository to execute."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from ..models.revenue import CalculationSource
from .buckets import BucketTotals
from .period import Period


@dataclass(frozen=True)
class AggregateFields:
    """Complete next state of a period aggregate (never a partial write)."""

    invoice_count: int
    total_amount: int
    total_paid_amount: int
    total_pending_amount: int
    calculation_source: str = CalculationSource.INVOICE_EVENT.value

    @property
    def buckets(self) -> BucketTotals:
        return BucketTotals(self.total_paid_amount, self.total_pending_amount)

    @classmethod
    def from_aggregate(cls, aggregate: Any) -> "AggregateFields":
        """Read the numeric fields off a stored aggregate row."""
        return cls(
            invoice_count=aggregate.invoice_count,
            total_amount=aggregate.total_amount,
            total_paid_amount=aggregate.total_paid_amount,
            total_pending_amount=aggregate.total_pending_amount,
            calculation_source=aggregate.calculation_source,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "invoice_count": self.invoice_count,
            "total_amount": self.total_amount,
            "total_paid_amount": self.total_paid_amount,
            "total_pending_amount": self.total_pending_amount,
            "calculation_source": self.calculation_source,
        }


@dataclass(frozen=True)
class UpsertAggregate:
    period: Period
    fields: AggregateFields

    def to_dict(self) -> dict[str, Any]:
        return {"action": "upsert", "period": self.period.isoformat(), **self.fields.to_dict()}


@dataclass(frozen=True)
class DeleteAggregate:
    period: Period

    def to_dict(self) -> dict[str, Any]:
        return {"action": "delete", "period": self.period.isoformat()}


WriteIntent = Union[UpsertAggregate, DeleteAggregate]
