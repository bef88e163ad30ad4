"""Read path: the rolling 12-month revenue series and its statistics."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ..domain.repositories import RevenueRepository
from ..domain.templates import (
    RevenueDisplayEntity,
    build_defaults_from_fresh_template,
    build_template_and_periods,
    merge_with_template,
)
from ..logging_config import get_logger
from .statistics import RevenueStatistics, calculate_statistics

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RollingYearService:
    """Builds the dense 12-month series from sparse stored aggregates.

    ``calculate_for_rolling_year`` never raises: on any failure it falls back to
    an all-zero series, and to an empty list if even that cannot be built.
    """

    def __init__(
        self,
        repository: RevenueRepository,
        *,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repository = repository
        self._clock = clock or _utcnow
        self._logger = logger or get_logger(__name__)

    def calculate_for_rolling_year(self) -> list[RevenueDisplayEntity]:
        try:
            now = self._clock()
        except Exception:
            self._logger.exception("Clock failed, falling back to system UTC time")
            now = _utcnow()

        try:
            window = build_template_and_periods(now)
            aggregates = self._repository.find_by_period_range(
                window.start_period.start, window.end_period.start
            )
            merged = merge_with_template(window.template, aggregates)
        except Exception:
            self._logger.exception(
                "Rolling-year calculation failed, using zero defaults",
                extra={"now": str(now)},
            )
            return self._degraded(now)

        self._logger.info(
            "Calculated rolling-year revenue",
            extra={
                "start_period": window.start_period.key,
                "end_period": window.end_period.key,
                "stored_months": len(aggregates),
                "months_with_data": sum(1 for e in merged if e.total_amount),
            },
        )
        return merged

    def _degraded(self, now: datetime) -> list[RevenueDisplayEntity]:
        try:
            return build_defaults_from_fresh_template(now)
        except Exception:
            self._logger.exception("Default template generation failed, returning empty series")
            return []

    def calculate_statistics(
        self, entries: Optional[list[RevenueDisplayEntity]] = None
    ) -> RevenueStatistics:
        if entries is None:
            entries = self.calculate_for_rolling_year()
        return calculate_statistics(entries)

    def build_report(self) -> dict[str, Any]:
        """JSON-ready ``{"months": [...], "statistics": {...}}``."""
        entries = self.calculate_for_rolling_year()
        return {
            "months": [entry.to_dict() for entry in entries],
            "statistics": calculate_statistics(entries).to_dict(),
        }
