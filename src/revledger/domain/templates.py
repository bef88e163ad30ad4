"""Rolling 12-month window generation and merging with stored aggregates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterable, Optional

from ..errors import InvalidInputError
from ..models.revenue import CalculationSource
from .period import Period, require_period

ROLLING_WINDOW_MONTHS = 12

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


@dataclass(frozen=True)
class RollingMonth:
    """One slot of the rolling window; derived, never persisted."""

    period: Period
    display_order: int
    month_number: int
    year: int
    month_abbrev: str


@dataclass(frozen=True)
class TemplateAndPeriods:
    template: tuple[RollingMonth, ...]
    start_period: Period
    end_period: Period


@dataclass(frozen=True)
class RevenueDisplayEntity:
    """A template month populated with stored values or zero defaults."""

    period: Period
    display_order: int
    year: int
    month_number: int
    month_abbrev: str
    invoice_count: int = 0
    total_amount: int = 0
    total_paid_amount: int = 0
    total_pending_amount: int = 0
    is_calculated: bool = False
    calculation_source: str = CalculationSource.TEMPLATE.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.isoformat(),
            "display_order": self.display_order,
            "year": self.year,
            "month_number": self.month_number,
            "month": self.month_abbrev,
            "invoice_count": self.invoice_count,
            "total_amount": self.total_amount,
            "total_paid_amount": self.total_paid_amount,
            "total_pending_amount": self.total_pending_amount,
            "is_calculated": self.is_calculated,
            "calculation_source": self.calculation_source,
        }


def _current_period(now: Optional[date | datetime]) -> Period:
    if now is None:
        now = datetime.now(timezone.utc)
    return Period.from_date(now)


def generate_months_template(end_period: Period) -> tuple[RollingMonth, ...]:
    """The window of ``ROLLING_WINDOW_MONTHS`` months ending at ``end_period``, oldest first."""

    start = end_period.shift(-(ROLLING_WINDOW_MONTHS - 1))
    months = []
    for order in range(ROLLING_WINDOW_MONTHS):
        period = start.shift(order)
        months.append(
            RollingMonth(
                period=period,
                display_order=order,
                month_number=period.month,
                year=period.year,
                month_abbrev=MONTH_ABBREVIATIONS[period.month - 1],
            )
        )
    return tuple(months)


def _validated_template(now: Optional[date | datetime]) -> tuple[RollingMonth, ...]:
    template = generate_months_template(_current_period(now))
    if len(template) != ROLLING_WINDOW_MONTHS:
        raise InvalidInputError(
            "Template generation failed: wrong number of months",
            details={"months": len(template)},
        )
    return template


def build_template_and_periods(now: Optional[date | datetime] = None) -> TemplateAndPeriods:
    """Build the rolling window for ``now`` (UTC now when omitted)."""

    template = _validated_template(now)
    return TemplateAndPeriods(
        template=template,
        start_period=template[0].period,
        end_period=template[-1].period,
    )


def default_display_entity(month: RollingMonth) -> RevenueDisplayEntity:
    return RevenueDisplayEntity(
        period=month.period,
        display_order=month.display_order,
        year=month.year,
        month_number=month.month_number,
        month_abbrev=month.month_abbrev,
    )


def to_display_entity(month: RollingMonth, aggregate: Any) -> RevenueDisplayEntity:
    """Project a stored aggregate onto its template slot."""
    return RevenueDisplayEntity(
        period=month.period,
        display_order=month.display_order,
        year=month.year,
        month_number=month.month_number,
        month_abbrev=month.month_abbrev,
        invoice_count=aggregate.invoice_count,
        total_amount=aggregate.total_amount,
        total_paid_amount=aggregate.total_paid_amount,
        total_pending_amount=aggregate.total_pending_amount,
        is_calculated=bool(aggregate.is_calculated),
        calculation_source=aggregate.calculation_source,
    )


def merge_with_template(
    template: Iterable[RollingMonth], aggregates: Iterable[Any]
) -> list[RevenueDisplayEntity]:
    """Dense series in template order; months with no aggregate get zero defaults.

    Aggregates outside the window are ignored.
    """

    lookup = {require_period(aggregate.period): aggregate for aggregate in aggregates}
    merged = []
    for month in template:
        aggregate = lookup.get(month.period)
        if aggregate is None:
            merged.append(default_display_entity(month))
        else:
            merged.append(to_display_entity(month, aggregate))
    return merged


def build_defaults_from_fresh_template(
    now: Optional[date | datetime] = None,
) -> list[RevenueDisplayEntity]:
    """All-zero series for the current window; the read path's fallback."""
    return [default_display_entity(month) for month in _validated_template(now)]
