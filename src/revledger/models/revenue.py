"""SQLModel definition for per-period revenue aggregates."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class CalculationSource(str, Enum):
    """Provenance of an aggregate's numbers."""

    SEED = "seed"
    INVOICE_EVENT = "invoice_event"
    TEMPLATE = "template"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RevenueAggregate(SQLModel, table=True):
    """Running totals for one calendar month, keyed by the month's first day."""

    __tablename__: ClassVar[str] = "revenue_aggregate"

    id: Optional[int] = Field(default=None, primary_key=True)
    period: date = Field(nullable=False, unique=True, index=True)
    invoice_count: int = Field(default=0, nullable=False, ge=0)
    total_amount: int = Field(default=0, nullable=False, ge=0, description="Minor currency units")
    total_paid_amount: int = Field(default=0, nullable=False, ge=0)
    total_pending_amount: int = Field(default=0, nullable=False, ge=0)
    is_calculated: bool = Field(default=True, nullable=False)
    calculation_source: str = Field(
        default=CalculationSource.INVOICE_EVENT.value, nullable=False, max_length=32
    )
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
