"""Invoice count and total arithmetic for a period aggregate."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class AggregateTotals:
    invoice_count: int = 0
    total_amount: int = 0


def after_add(count: int, total: int, added_amount: int) -> AggregateTotals:
    return AggregateTotals(invoice_count=count + 1, total_amount=total + added_amount)


def after_removal(count: int, total: int, removed_amount: int) -> AggregateTotals:
    return AggregateTotals(
        invoice_count=max(0, count - 1),
        total_amount=max(0, total - removed_amount),
    )


def after_amount_change(
    count: int, total: int, previous_amount: int, current_amount: int
) -> AggregateTotals:
    return AggregateTotals(
        invoice_count=count,
        total_amount=max(0, total - previous_amount + current_amount),
    )
