"""Pytest configuration and shared fixtures for RevLedger tests.

This module provides database fixtures, invoice and aggregate factories, and a
fixed clock for testing domain logic, repositories and services without
touching a real database.
"""

from __future__ import annotations

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from revledger.models import RevenueAggregate  # noqa: F401
from revledger.domain.intents import AggregateFields
from revledger.domain.invoices import InvoiceSnapshot
from revledger.domain.period import require_period
from revledger.infra.database import create_session_factory
from revledger.infra.repositories import SQLModelRevenueRepository

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture
def session_factory(db_engine):
    """Transactional session factory bound to the test engine."""
    return create_session_factory(db_engine)


@pytest.fixture
def repository(session_factory):
    return SQLModelRevenueRepository(session_factory)


# =============================================================================
# Data Factories
# =============================================================================


@pytest.fixture
def snapshot_factory():
    """Build invoice snapshots with sensible defaults.

    Usage:
        snap = snapshot_factory(amount=500, status="pending", period="2024-03")
    """

    counter = {"n": 0}

    def _create(amount=500, status="pending", period="2024-03", invoice_id=None):
        if invoice_id is None:
            counter["n"] += 1
            invoice_id = f"inv-{counter['n']}"
        return InvoiceSnapshot.from_dict(
            invoice_id, {"amount": amount, "status": status, "period": period}
        )

    return _create


@pytest.fixture
def aggregate_factory(repository):
    """Store an aggregate row for a period and return it."""

    def _create(period="2024-03", count=1, paid=0, pending=0, total=None, source="invoice_event"):
        fields = AggregateFields(
            invoice_count=count,
            total_amount=paid + pending if total is None else total,
            total_paid_amount=paid,
            total_pending_amount=pending,
            calculation_source=source,
        )
        return repository.upsert(require_period(period).start, fields)

    return _create


@pytest.fixture
def fixed_now():
    return datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)
