"""SQLModel table exports."""

from .revenue import CalculationSource, RevenueAggregate

__all__ = [
    "CalculationSource",
    "RevenueAggregate",
]
