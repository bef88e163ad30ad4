"""Full recomputation of aggregates from a complete invoice list.

Used for initial loads and repairs; normal operation goes through
``revenue_events`` and never scans every invoice.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..domain.buckets import BucketTotals, apply_delta
from ..domain.eligibility import is_eligible
from ..domain.intents import AggregateFields
from ..domain.invoices import InvoiceSnapshot
from ..domain.period import Period
from ..domain.repositories import RevenueRepository
from ..errors import InvalidInputError
from ..logging_config import get_logger
from ..models.revenue import CalculationSource


def build_aggregates_from_invoices(
    invoices: Iterable[InvoiceSnapshot],
) -> dict[Period, AggregateFields]:
    """Per-period totals over the eligible invoices, keyed oldest first."""

    counts: dict[Period, int] = {}
    buckets: dict[Period, BucketTotals] = {}
    seen: set[str] = set()

    for invoice in invoices:
        if invoice.invoice_id in seen:
            raise InvalidInputError(
                f"Duplicate invoice id in seed data: {invoice.invoice_id}",
                details={"invoice_id": invoice.invoice_id},
            )
        seen.add(invoice.invoice_id)
        if not is_eligible(invoice.status):
            continue
        counts[invoice.period] = counts.get(invoice.period, 0) + 1
        buckets[invoice.period] = apply_delta(
            buckets.get(invoice.period, BucketTotals()), invoice.status, invoice.amount
        )

    return {
        period: AggregateFields(
            invoice_count=counts[period],
            total_amount=buckets[period].total_paid_amount + buckets[period].total_pending_amount,
            total_paid_amount=buckets[period].total_paid_amount,
            total_pending_amount=buckets[period].total_pending_amount,
            calculation_source=CalculationSource.SEED.value,
        )
        for period in sorted(counts)
    }


def reseed(
    repository: RevenueRepository,
    invoices: Iterable[InvoiceSnapshot],
    *,
    logger: Optional[logging.Logger] = None,
) -> dict[Period, AggregateFields]:
    """Replace every stored aggregate with totals recomputed from ``invoices``."""

    logger = logger or get_logger(__name__)
    seeded = build_aggregates_from_invoices(invoices)

    stale = [row.period for row in repository.list_all() if Period.from_date(row.period) not in seeded]
    for period in stale:
        repository.delete_by_period(period)
    for period, fields in seeded.items():
        repository.upsert(period.start, fields)

    logger.info(
        "Reseeded revenue aggregates",
        extra={"periods": len(seeded), "removed_periods": len(stale)},
    )
    return seeded
