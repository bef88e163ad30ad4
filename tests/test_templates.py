"""Tests for the rolling 12-month template and merge."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from revledger.domain.period import Period
from revledger.domain.templates import (
    build_defaults_from_fresh_template,
    build_template_and_periods,
    generate_months_template,
    merge_with_template,
)


def _aggregate(period, total=500, paid=500, pending=0, count=1):
    return SimpleNamespace(
        period=period,
        invoice_count=count,
        total_amount=total,
        total_paid_amount=paid,
        total_pending_amount=pending,
        is_calculated=True,
        calculation_source="invoice_event",
    )


def test_window_is_twelve_months_ending_now(fixed_now):
    window = build_template_and_periods(fixed_now)

    assert len(window.template) == 12
    assert window.start_period == Period(2023, 7)
    assert window.end_period == Period(2024, 6)
    assert [m.display_order for m in window.template] == list(range(12))
    assert [m.period for m in window.template] == sorted(m.period for m in window.template)


def test_window_crosses_year_boundary():
    template = generate_months_template(Period(2024, 1))

    assert template[0].period == Period(2023, 2)
    assert template[-1].period == Period(2024, 1)
    assert [(m.month_abbrev, m.year) for m in template[-2:]] == [("Dec", 2023), ("Jan", 2024)]


def test_window_uses_utc_month():
    # Late on the last day of May in UTC-5 is already June in UTC
    now = datetime(2024, 5, 31, 22, 0, tzinfo=timezone(timedelta(hours=-5)))

    assert build_template_and_periods(now).end_period == Period(2024, 6)


def test_merge_fills_gaps_with_zero_defaults(fixed_now):
    window = build_template_and_periods(fixed_now)
    aggregates = [_aggregate(date(2024, 3, 1), total=900, paid=400, pending=500, count=2)]

    merged = merge_with_template(window.template, aggregates)

    assert len(merged) == 12
    march = next(e for e in merged if e.period == Period(2024, 3))
    assert (march.invoice_count, march.total_amount, march.total_paid_amount) == (2, 900, 400)
    assert march.is_calculated and march.calculation_source == "invoice_event"
    others = [e for e in merged if e.period != Period(2024, 3)]
    assert all(e.total_amount == 0 and e.invoice_count == 0 for e in others)
    assert all(e.calculation_source == "template" and not e.is_calculated for e in others)


def test_merge_keeps_template_order_regardless_of_input_order(fixed_now):
    window = build_template_and_periods(fixed_now)
    aggregates = [
        _aggregate(date(2024, 5, 1), total=5),
        _aggregate(date(2023, 8, 1), total=8),
        _aggregate(date(2024, 1, 1), total=1),
    ]

    merged = merge_with_template(window.template, aggregates)

    assert [e.period for e in merged] == [m.period for m in window.template]
    assert [e.total_amount for e in merged if e.total_amount] == [8, 1, 5]


def test_merge_ignores_aggregates_outside_window(fixed_now):
    window = build_template_and_periods(fixed_now)

    merged = merge_with_template(window.template, [_aggregate(date(2022, 1, 1))])

    assert sum(e.total_amount for e in merged) == 0


def test_merge_is_idempotent(fixed_now):
    window = build_template_and_periods(fixed_now)
    aggregates = [_aggregate(date(2024, 2, 1)), _aggregate(date(2024, 6, 1), total=50)]

    assert merge_with_template(window.template, aggregates) == merge_with_template(
        window.template, aggregates
    )


def test_fresh_defaults_are_all_zero(fixed_now):
    defaults = build_defaults_from_fresh_template(fixed_now)

    assert len(defaults) == 12
    assert all(e.total_amount == 0 for e in defaults)
    assert defaults[0].to_dict()["period"] == "2023-07-01"
    assert defaults[-1].to_dict()["month"] == "Jun"
