"""SQLModel implementation of the revenue aggregate repository."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Callable, ContextManager, Optional

from sqlmodel import Session, select

from ...domain.intents import AggregateFields
from ...models.revenue import RevenueAggregate


class SQLModelRevenueRepository:
    """SQLModel-based revenue aggregate repository."""

    def __init__(self, session_factory: Callable[[], ContextManager[Session]]):
        self.session_factory = session_factory

    def get_by_period(self, period: date) -> Optional[RevenueAggregate]:
        with self.session_factory() as session:
            statement = select(RevenueAggregate).where(RevenueAggregate.period == period)
            return session.exec(statement).first()

    def find_by_period_range(self, start_period: date, end_period: date) -> list[RevenueAggregate]:
        """Stored aggregates within the inclusive range, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(RevenueAggregate)
                .where(RevenueAggregate.period >= start_period)
                .where(RevenueAggregate.period <= end_period)
                .order_by(RevenueAggregate.period)  # type: ignore
            )
            return list(session.exec(statement).all())

    def list_all(self) -> list[RevenueAggregate]:
        with self.session_factory() as session:
            statement = select(RevenueAggregate).order_by(RevenueAggregate.period)  # type: ignore
            return list(session.exec(statement).all())

    def upsert(self, period: date, fields: AggregateFields) -> RevenueAggregate:
        """Create the row for ``period`` or overwrite every numeric field on it."""
        with self.session_factory() as session:
            aggregate = session.exec(
                select(RevenueAggregate).where(RevenueAggregate.period == period)
            ).first()
            if aggregate is None:
                aggregate = RevenueAggregate(period=period)
            aggregate.invoice_count = fields.invoice_count
            aggregate.total_amount = fields.total_amount
            aggregate.total_paid_amount = fields.total_paid_amount
            aggregate.total_pending_amount = fields.total_pending_amount
            aggregate.calculation_source = fields.calculation_source
            aggregate.is_calculated = True
            aggregate.updated_at = datetime.now(timezone.utc)
            session.add(aggregate)
            session.commit()
            session.refresh(aggregate)
            session.expunge(aggregate)
            return aggregate

    def delete_by_period(self, period: date) -> None:
        with self.session_factory() as session:
            aggregate = session.exec(
                select(RevenueAggregate).where(RevenueAggregate.period == period)
            ).first()
            if aggregate:
                session.delete(aggregate)
                session.commit()
