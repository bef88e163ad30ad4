"""Classification of invoice changes and the aggregate update each one implies.

Every invoice change maps to exactly one transition kind:

* ``ineligible_to_ineligible``: nothing to do.
* ``ineligible_to_eligible``: count +1, total and the current bucket += current amount.
* ``eligible_to_ineligible``: count -1, total and the previous bucket -= previous
  amount; a period whose count reaches 0 is deleted, not zeroed.
* ``eligible_amount_change``: same eligible status, total and bucket move by the
  amount difference.
* ``eligible_status_change``: pending <-> paid, total moves by the amount
  difference and the value moves between buckets.

Creation is a change from "no state" and deletion a change to "no state"; both
count as ineligible. The last three kinds presuppose an aggregate that already
counts the invoice; a missing one raises ``AggregateInvariantError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..errors import AggregateInvariantError
from ..models.revenue import CalculationSource
from .aggregates import after_add, after_amount_change, after_removal
from .buckets import BucketMove, BucketTotals, apply_delta, move_between_buckets
from .eligibility import InvoiceStatus, classify_eligibility
from .intents import AggregateFields
from .invoices import InvoiceSnapshot


class TransitionKind(str, Enum):
    INELIGIBLE_TO_INELIGIBLE = "ineligible_to_ineligible"
    INELIGIBLE_TO_ELIGIBLE = "ineligible_to_eligible"
    ELIGIBLE_TO_INELIGIBLE = "eligible_to_ineligible"
    ELIGIBLE_AMOUNT_CHANGE = "eligible_amount_change"
    ELIGIBLE_STATUS_CHANGE = "eligible_status_change"


_REQUIRES_EXISTING = frozenset(
    {
        TransitionKind.ELIGIBLE_TO_INELIGIBLE,
        TransitionKind.ELIGIBLE_AMOUNT_CHANGE,
        TransitionKind.ELIGIBLE_STATUS_CHANGE,
    }
)


@dataclass(frozen=True)
class InvoiceState:
    status: InvoiceStatus
    amount: int

    @classmethod
    def from_snapshot(cls, snapshot: Optional[InvoiceSnapshot]) -> Optional["InvoiceState"]:
        if snapshot is None:
            return None
        return cls(status=snapshot.status, amount=snapshot.amount)


@dataclass(frozen=True)
class TransitionOutcome:
    """Result of applying a transition to a period's aggregate.

    ``fields`` is the next aggregate state, ``delete`` asks for the row to be
    removed; both unset means the stored aggregate stays as it is.
    """

    kind: TransitionKind
    fields: Optional[AggregateFields] = None
    delete: bool = False

    @property
    def changed(self) -> bool:
        return self.delete or self.fields is not None


def classify_transition(
    previous: Optional[InvoiceState], current: Optional[InvoiceState]
) -> TransitionKind:
    eligibility = classify_eligibility(
        previous.status if previous else None, current.status if current else None
    )
    if not eligibility.was_eligible and not eligibility.is_eligible:
        return TransitionKind.INELIGIBLE_TO_INELIGIBLE
    if not eligibility.was_eligible:
        return TransitionKind.INELIGIBLE_TO_ELIGIBLE
    if not eligibility.is_eligible:
        return TransitionKind.ELIGIBLE_TO_INELIGIBLE
    if previous.status == current.status:  # type: ignore[union-attr]
        return TransitionKind.ELIGIBLE_AMOUNT_CHANGE
    return TransitionKind.ELIGIBLE_STATUS_CHANGE


def _compose(
    count: int, total: int, buckets: BucketTotals
) -> AggregateFields:
    return AggregateFields(
        invoice_count=count,
        total_amount=total,
        total_paid_amount=buckets.total_paid_amount,
        total_pending_amount=buckets.total_pending_amount,
        calculation_source=CalculationSource.INVOICE_EVENT.value,
    )


def _unchanged(fields: AggregateFields, existing: AggregateFields) -> bool:
    return (
        fields.invoice_count == existing.invoice_count
        and fields.total_amount == existing.total_amount
        and fields.buckets == existing.buckets
    )


def _handle_no_op(
    kind: TransitionKind,
    previous: Optional[InvoiceState],
    current: Optional[InvoiceState],
    existing: Optional[AggregateFields],
) -> TransitionOutcome:
    return TransitionOutcome(kind=kind)


def _handle_added(kind, previous, current, existing) -> TransitionOutcome:
    base = existing or AggregateFields(0, 0, 0, 0)
    totals = after_add(base.invoice_count, base.total_amount, current.amount)
    buckets = apply_delta(base.buckets, current.status, current.amount)
    return TransitionOutcome(
        kind=kind, fields=_compose(totals.invoice_count, totals.total_amount, buckets)
    )


def _handle_removed(kind, previous, current, existing) -> TransitionOutcome:
    totals = after_removal(existing.invoice_count, existing.total_amount, previous.amount)
    if totals.invoice_count == 0:
        return TransitionOutcome(kind=kind, delete=True)
    buckets = apply_delta(existing.buckets, previous.status, -previous.amount)
    return TransitionOutcome(
        kind=kind, fields=_compose(totals.invoice_count, totals.total_amount, buckets)
    )


def _handle_amount_change(kind, previous, current, existing) -> TransitionOutcome:
    totals = after_amount_change(
        existing.invoice_count, existing.total_amount, previous.amount, current.amount
    )
    buckets = apply_delta(existing.buckets, current.status, current.amount - previous.amount)
    fields = _compose(totals.invoice_count, totals.total_amount, buckets)
    if _unchanged(fields, existing):
        return TransitionOutcome(kind=kind)
    return TransitionOutcome(kind=kind, fields=fields)


def _handle_status_change(kind, previous, current, existing) -> TransitionOutcome:
    totals = after_amount_change(
        existing.invoice_count, existing.total_amount, previous.amount, current.amount
    )
    buckets = move_between_buckets(
        existing.buckets,
        BucketMove(
            from_status=previous.status,
            to_status=current.status,
            previous_amount=previous.amount,
            current_amount=current.amount,
        ),
    )
    return TransitionOutcome(
        kind=kind, fields=_compose(totals.invoice_count, totals.total_amount, buckets)
    )


TransitionHandler = Callable[
    [TransitionKind, Optional[InvoiceState], Optional[InvoiceState], Optional[AggregateFields]],
    TransitionOutcome,
]

TRANSITION_HANDLERS: dict[TransitionKind, TransitionHandler] = {
    TransitionKind.INELIGIBLE_TO_INELIGIBLE: _handle_no_op,
    TransitionKind.INELIGIBLE_TO_ELIGIBLE: _handle_added,
    TransitionKind.ELIGIBLE_TO_INELIGIBLE: _handle_removed,
    TransitionKind.ELIGIBLE_AMOUNT_CHANGE: _handle_amount_change,
    TransitionKind.ELIGIBLE_STATUS_CHANGE: _handle_status_change,
}


def apply_transition(
    previous: Optional[InvoiceState],
    current: Optional[InvoiceState],
    existing: Optional[AggregateFields],
) -> TransitionOutcome:
    """Classify the change and compute the period's next aggregate state."""

    kind = classify_transition(previous, current)
    if kind in _REQUIRES_EXISTING and existing is None:
        raise AggregateInvariantError(
            f"No aggregate exists for a {kind.value} transition",
            details={
                "transition": kind.value,
                "previous_status": previous.status.value if previous else None,
                "current_status": current.status.value if current else None,
            },
        )
    return TRANSITION_HANDLERS[kind](kind, previous, current, existing)
