"""Arithmetic over the paid and pending sub-totals of a period."""

from __future__ import annotations

from dataclasses import dataclass, replace

from .eligibility import InvoiceStatus, StatusLike, coerce_status


@dataclass(frozen=True)
class BucketTotals:
    total_paid_amount: int = 0
    total_pending_amount: int = 0


@dataclass(frozen=True)
class BucketMove:
    from_status: StatusLike
    to_status: StatusLike
    previous_amount: int
    current_amount: int


def apply_delta(buckets: BucketTotals, status: StatusLike, delta: int) -> BucketTotals:
    """Add ``delta`` to the bucket for ``status``, clamping at zero.

    Statuses without a bucket leave the totals unchanged.
    """

    member = coerce_status(status)
    if member is InvoiceStatus.PAID:
        return replace(buckets, total_paid_amount=max(0, buckets.total_paid_amount + delta))
    if member is InvoiceStatus.PENDING:
        return replace(
            buckets, total_pending_amount=max(0, buckets.total_pending_amount + delta)
        )
    return buckets


def move_between_buckets(buckets: BucketTotals, move: BucketMove) -> BucketTotals:
    """Take ``previous_amount`` out of one bucket and put ``current_amount`` into another."""

    drained = apply_delta(buckets, move.from_status, -move.previous_amount)
    return apply_delta(drained, move.to_status, move.current_amount)
