"""Revenue aggregate repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ...models.revenue import RevenueAggregate
from ..intents import AggregateFields


class RevenueRepository(Protocol):
    """Persistence boundary for per-period revenue aggregates.

    Implementations own storage; callers serialize read-compute-write per period.
    """

    def get_by_period(self, period: date) -> Optional[RevenueAggregate]:
        """Return the aggregate for the month starting at ``period``."""
        ...

    def find_by_period_range(self, start_period: date, end_period: date) -> list[RevenueAggregate]:
        """Return stored aggregates with start <= period <= end, oldest first (may be sparse)."""
        ...

    def list_all(self) -> list[RevenueAggregate]:
        """List every stored aggregate, oldest first."""
        ...

    def upsert(self, period: date, fields: AggregateFields) -> RevenueAggregate:
        """Create or replace the aggregate for ``period``."""
        ...

    def delete_by_period(self, period: date) -> None:
        """Remove the aggregate for ``period`` if one exists."""
        ...
