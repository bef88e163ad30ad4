"""Tests for rolling-year statistics."""

from __future__ import annotations

from dataclasses import replace

from revledger.domain.templates import build_defaults_from_fresh_template
from revledger.services.statistics import RevenueStatistics, calculate_statistics


def _series(fixed_now, amounts):
    defaults = build_defaults_from_fresh_template(fixed_now)
    return [replace(entry, total_amount=amount) for entry, amount in zip(defaults, amounts)]


def test_all_zero_series(fixed_now):
    stats = calculate_statistics(build_defaults_from_fresh_template(fixed_now))

    assert stats == RevenueStatistics(total=0, average=0, minimum=0, maximum=0, months_with_data=0)


def test_min_max_average_ignore_empty_months(fixed_now):
    amounts = [0, 100, 0, 400, 0, 0, 250, 0, 0, 0, 0, 0]

    stats = calculate_statistics(_series(fixed_now, amounts))

    assert stats.to_dict() == {
        "total": 750,
        "average": 250,
        "minimum": 100,
        "maximum": 400,
        "months_with_data": 3,
    }


def test_average_rounds_half_up(fixed_now):
    amounts = [1, 2] + [0] * 10

    assert calculate_statistics(_series(fixed_now, amounts)).average == 2
