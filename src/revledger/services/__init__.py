"""Service module exports."""

from . import export_csv, revenue_events, rolling_year, seeding, statistics

__all__ = [
    "export_csv",
    "revenue_events",
    "rolling_year",
    "seeding",
    "statistics",
]
