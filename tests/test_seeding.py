"""Tests for full recomputation of aggregates from invoices."""

from __future__ import annotations

from datetime import date

import pytest

from revledger.domain.period import Period
from revledger.errors import InvalidInputError
from revledger.services.seeding import build_aggregates_from_invoices, reseed


def test_build_aggregates_counts_only_eligible(snapshot_factory):
    invoices = [
        snapshot_factory(amount=500, status="paid", period="2024-03"),
        snapshot_factory(amount=200, status="pending", period="2024-03-28"),
        snapshot_factory(amount=999, status="draft", period="2024-03"),
        snapshot_factory(amount=50, status="pending", period="2024-01"),
        snapshot_factory(amount=70, status="void", period="2024-02"),
    ]

    seeded = build_aggregates_from_invoices(invoices)

    assert list(seeded) == [Period(2024, 1), Period(2024, 3)]
    march = seeded[Period(2024, 3)]
    assert (march.invoice_count, march.total_amount) == (2, 700)
    assert (march.total_paid_amount, march.total_pending_amount) == (500, 200)
    assert march.calculation_source == "seed"


def test_duplicate_invoice_ids_are_rejected(snapshot_factory):
    invoices = [snapshot_factory(invoice_id="a"), snapshot_factory(invoice_id="a")]

    with pytest.raises(InvalidInputError):
        build_aggregates_from_invoices(invoices)


def test_reseed_replaces_stored_aggregates(repository, aggregate_factory, snapshot_factory):
    aggregate_factory(period="2023-11", paid=12345)
    aggregate_factory(period="2024-03", paid=1)

    reseed(repository, [snapshot_factory(amount=400, status="paid", period="2024-03")])

    rows = repository.list_all()
    assert [row.period for row in rows] == [date(2024, 3, 1)]
    assert rows[0].total_amount == 400
    assert rows[0].calculation_source == "seed"
