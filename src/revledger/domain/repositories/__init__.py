"""Repository protocol definitions for domain layer."""

from .revenue import RevenueRepository

__all__ = [
    "RevenueRepository",
]
