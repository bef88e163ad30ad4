"""RevLedger: incremental monthly revenue aggregates from invoice events."""

from __future__ import annotations

from .config import BaseConfig
from .services.revenue_events import RevenueEventOrchestrator, apply_event
from .services.rolling_year import RollingYearService

__all__ = [
    "BaseConfig",
    "RevenueEventOrchestrator",
    "RollingYearService",
    "apply_event",
]
