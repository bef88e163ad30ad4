"""Turns invoice lifecycle events into revenue aggregate write intents."""

from __future__ import annotations

import logging
from typing import Optional

from ..domain.intents import AggregateFields, DeleteAggregate, UpsertAggregate, WriteIntent
from ..domain.invoices import EventKind, InvoiceEvent
from ..domain.repositories import RevenueRepository
from ..domain.transitions import InvoiceState, TransitionKind, apply_transition
from ..logging_config import get_logger
from ..models.revenue import RevenueAggregate


class RevenueEventOrchestrator:
    """Decides what aggregate mutation an invoice event implies.

    The orchestrator never touches storage: callers pass the period's current
    aggregate in and execute the returned intent. Reading, handling and writing
    for one period must be serialized by the caller (row lock or serializable
    transaction); the handlers are not idempotent.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or get_logger(__name__)

    def split(self, event: InvoiceEvent) -> list[InvoiceEvent]:
        """Break an update that moves an invoice between periods into delete + create.

        Single-period events come back unchanged.
        """

        if event.kind is not EventKind.UPDATED or len(event.periods) == 1:
            return [event]
        self._logger.info(
            "Invoice moved between periods, splitting update",
            extra={
                "invoice_id": event.invoice_id,
                "from_period": event.previous.period.key,  # type: ignore[union-attr]
                "to_period": event.current.period.key,  # type: ignore[union-attr]
            },
        )
        return [
            InvoiceEvent.deleted(event.previous),  # type: ignore[arg-type]
            InvoiceEvent.created(event.current),  # type: ignore[arg-type]
        ]

    def handle(
        self, event: InvoiceEvent, existing: Optional[RevenueAggregate]
    ) -> Optional[WriteIntent]:
        """Return the single write intent for ``event``, or None when nothing changes.

        Raises ``InvalidInputError`` for events spanning two periods and
        ``AggregateInvariantError`` when a transition needs a missing aggregate.
        """

        period = event.period
        existing_fields = AggregateFields.from_aggregate(existing) if existing is not None else None
        meta = {
            "invoice_id": event.invoice_id,
            "event_kind": event.kind.value,
            "period": period.key,
        }

        try:
            outcome = apply_transition(
                InvoiceState.from_snapshot(event.previous),
                InvoiceState.from_snapshot(event.current),
                existing_fields,
            )
        except Exception:
            self._logger.error("Revenue transition rejected", extra=meta, exc_info=True)
            raise

        meta["transition"] = outcome.kind.value
        if outcome.delete:
            self._logger.info("Last eligible invoice removed, deleting aggregate", extra=meta)
            return DeleteAggregate(period=period)
        if outcome.fields is None:
            if outcome.kind is TransitionKind.INELIGIBLE_TO_INELIGIBLE:
                self._logger.info("Invoice not eligible for revenue, skipping", extra=meta)
            else:
                self._logger.info("No changes affecting revenue calculation", extra=meta)
            return None

        self._logger.info(
            "Revenue aggregate updated",
            extra={**meta, **outcome.fields.to_dict(), "new_aggregate": existing is None},
        )
        return UpsertAggregate(period=period, fields=outcome.fields)


def execute_intent(repository: RevenueRepository, intent: WriteIntent) -> None:
    """Carry out a write intent against the repository."""

    if isinstance(intent, UpsertAggregate):
        repository.upsert(intent.period.start, intent.fields)
    elif isinstance(intent, DeleteAggregate):
        repository.delete_by_period(intent.period.start)
    else:
        raise TypeError(f"Unsupported write intent: {intent!r}")


def apply_event(
    repository: RevenueRepository,
    event: InvoiceEvent,
    orchestrator: Optional[RevenueEventOrchestrator] = None,
) -> list[WriteIntent]:
    """Read, handle and write for each period ``event`` touches.

    Returns the intents that were executed, in split order. An update that
    moves an invoice between periods runs two steps, each in its own
    repository transaction: if the second write fails, the first one stays
    committed and the error propagates. Re-seed the affected periods to repair.
    """

    orchestrator = orchestrator or RevenueEventOrchestrator()
    executed: list[WriteIntent] = []
    for step in orchestrator.split(event):
        existing = repository.get_by_period(step.period.start)
        intent = orchestrator.handle(step, existing)
        if intent is not None:
            execute_intent(repository, intent)
            executed.append(intent)
    return executed
