"""Tests for transition classification and per-kind aggregate updates."""

from __future__ import annotations

import pytest

from revledger.domain.intents import AggregateFields
from revledger.domain.eligibility import InvoiceStatus
from revledger.domain.transitions import (
    InvoiceState,
    TransitionKind,
    apply_transition,
    classify_transition,
)
from revledger.errors import AggregateInvariantError

PAID = InvoiceStatus.PAID
PENDING = InvoiceStatus.PENDING
DRAFT = InvoiceStatus.DRAFT
VOID = InvoiceStatus.VOID


def state(status, amount):
    return InvoiceState(status=status, amount=amount)


@pytest.mark.parametrize(
    "previous,current,expected",
    [
        (None, state(DRAFT, 100), TransitionKind.INELIGIBLE_TO_INELIGIBLE),
        (state(DRAFT, 100), state(VOID, 100), TransitionKind.INELIGIBLE_TO_INELIGIBLE),
        (state(DRAFT, 100), None, TransitionKind.INELIGIBLE_TO_INELIGIBLE),
        (None, state(PENDING, 100), TransitionKind.INELIGIBLE_TO_ELIGIBLE),
        (state(DRAFT, 100), state(PAID, 100), TransitionKind.INELIGIBLE_TO_ELIGIBLE),
        (state(PAID, 100), None, TransitionKind.ELIGIBLE_TO_INELIGIBLE),
        (state(PENDING, 100), state(VOID, 100), TransitionKind.ELIGIBLE_TO_INELIGIBLE),
        (state(PAID, 100), state(PAID, 200), TransitionKind.ELIGIBLE_AMOUNT_CHANGE),
        (state(PAID, 100), state(PAID, 100), TransitionKind.ELIGIBLE_AMOUNT_CHANGE),
        (state(PENDING, 100), state(PAID, 100), TransitionKind.ELIGIBLE_STATUS_CHANGE),
        (state(PAID, 100), state(PENDING, 150), TransitionKind.ELIGIBLE_STATUS_CHANGE),
    ],
)
def test_classify_transition(previous, current, expected):
    assert classify_transition(previous, current) is expected


def test_ineligible_to_eligible_without_aggregate_starts_from_zero():
    outcome = apply_transition(None, state(PENDING, 500), None)

    assert outcome.fields == AggregateFields(1, 500, 0, 500)
    assert not outcome.delete


def test_ineligible_to_eligible_adds_to_existing():
    existing = AggregateFields(1, 300, 300, 0)

    outcome = apply_transition(state(DRAFT, 200), state(PAID, 200), existing)

    assert outcome.fields == AggregateFields(2, 500, 500, 0)


def test_removal_of_last_invoice_deletes_aggregate():
    outcome = apply_transition(state(PAID, 500), None, AggregateFields(1, 500, 500, 0))

    assert outcome.delete
    assert outcome.fields is None
    assert outcome.changed


def test_removal_keeps_other_invoices():
    outcome = apply_transition(state(PENDING, 200), state(VOID, 200), AggregateFields(2, 700, 500, 200))

    assert outcome.fields == AggregateFields(1, 500, 500, 0)


def test_amount_change_moves_total_and_bucket():
    outcome = apply_transition(state(PAID, 700), state(PAID, 900), AggregateFields(2, 1200, 700, 500))

    assert outcome.kind is TransitionKind.ELIGIBLE_AMOUNT_CHANGE
    assert outcome.fields == AggregateFields(2, 1400, 900, 500)


def test_zero_delta_amount_change_is_a_no_op():
    outcome = apply_transition(state(PAID, 700), state(PAID, 700), AggregateFields(1, 700, 700, 0))

    assert not outcome.changed


def test_status_change_with_amount_change():
    outcome = apply_transition(
        state(PENDING, 500), state(PAID, 650), AggregateFields(2, 800, 300, 500)
    )

    assert outcome.fields == AggregateFields(2, 950, 950, 0)


@pytest.mark.parametrize(
    "previous,current",
    [
        (state(PAID, 100), None),
        (state(PAID, 100), state(PAID, 200)),
        (state(PAID, 100), state(PAID, 100)),
        (state(PENDING, 100), state(PAID, 100)),
    ],
)
def test_eligible_transitions_require_existing_aggregate(previous, current):
    with pytest.raises(AggregateInvariantError) as excinfo:
        apply_transition(previous, current, None)

    assert excinfo.value.code == "INVARIANT_VIOLATION"


def test_ineligible_transition_never_needs_aggregate():
    outcome = apply_transition(state(DRAFT, 100), state(VOID, 300), None)

    assert outcome.kind is TransitionKind.INELIGIBLE_TO_INELIGIBLE
    assert not outcome.changed
