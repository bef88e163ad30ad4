"""Concrete repository implementations using SQLModel."""

from .revenue import SQLModelRevenueRepository

__all__ = ["SQLModelRevenueRepository"]
