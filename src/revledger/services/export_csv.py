"""CSV export of the rolling-year revenue series."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from ..domain.templates import RevenueDisplayEntity

HEADERS = [
    "period",
    "month",
    "year",
    "invoice_count",
    "total_amount",
    "total_paid_amount",
    "total_pending_amount",
    "calculation_source",
]


def export_rolling_year_csv(
    *, entries: Iterable[RevenueDisplayEntity], output_path: Path
) -> Path:
    """Write the series to CSV at `output_path`, one row per month in window order.

    Columns are deterministic (see ``HEADERS``); amounts stay in minor units.
    Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Use newline='' for csv on Windows
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(
            fh, fieldnames=HEADERS, extrasaction="ignore", quoting=csv.QUOTE_MINIMAL
        )
        writer.writeheader()
        for entry in sorted(entries, key=lambda e: e.display_order):
            row = entry.to_dict()
            writer.writerow(row)

    return output_path
