"""Invoice snapshots and lifecycle events as seen by the revenue engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from ..errors import InvalidInputError
from .eligibility import InvoiceStatus, coerce_status
from .period import Period, resolve_period


class EventKind(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class InvoiceSnapshot:
    """Revenue-relevant fields of an invoice at one point in time."""

    invoice_id: str
    amount: int
    status: InvoiceStatus
    period: Period

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise InvalidInputError(
                "Invoice amount must be an integer in minor currency units",
                details={"invoice_id": self.invoice_id, "amount": repr(self.amount)},
            )
        if self.amount < 0:
            raise InvalidInputError(
                "Invoice amount must not be negative",
                details={"invoice_id": self.invoice_id, "amount": self.amount},
            )

    @classmethod
    def from_dict(cls, invoice_id: str, data: Mapping[str, Any]) -> "InvoiceSnapshot":
        """Validate a raw ``{status, amount, period|date}`` mapping."""

        if not isinstance(data, Mapping):
            raise InvalidInputError(
                "Invoice state must be a mapping", details={"invoice_id": invoice_id}
            )
        missing = [name for name in ("status", "amount") if data.get(name) is None]
        raw_period = data.get("period", data.get("date"))
        if raw_period is None:
            missing.append("period")
        if missing:
            raise InvalidInputError(
                f"Invoice state is missing required fields: {', '.join(missing)}",
                details={"invoice_id": invoice_id, "missing": missing},
            )

        status = coerce_status(data["status"])
        if status is None:
            raise InvalidInputError(
                f"Unknown invoice status: {data['status']!r}",
                details={"invoice_id": invoice_id, "status": data["status"]},
            )
        return cls(
            invoice_id=invoice_id,
            amount=data["amount"],
            status=status,
            period=resolve_period(raw_period).unwrap(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "amount": self.amount,
            "period": self.period.isoformat(),
        }


@dataclass(frozen=True)
class InvoiceEvent:
    """A created/updated/deleted notification carrying before/after snapshots.

    ``previous`` is absent for ``created`` and ``current`` is absent for
    ``deleted``; ``updated`` carries both.
    """

    kind: EventKind
    invoice_id: str
    previous: Optional[InvoiceSnapshot] = None
    current: Optional[InvoiceSnapshot] = None

    def __post_init__(self) -> None:
        details = {"invoice_id": self.invoice_id, "kind": self.kind.value}
        if self.kind is EventKind.CREATED and (self.previous is not None or self.current is None):
            raise InvalidInputError("A created event needs only a current state", details=details)
        if self.kind is EventKind.DELETED and (self.current is not None or self.previous is None):
            raise InvalidInputError("A deleted event needs only a previous state", details=details)
        if self.kind is EventKind.UPDATED and (self.previous is None or self.current is None):
            raise InvalidInputError(
                "An updated event needs both previous and current states", details=details
            )

    @property
    def periods(self) -> tuple[Period, ...]:
        seen: list[Period] = []
        for snapshot in (self.previous, self.current):
            if snapshot is not None and snapshot.period not in seen:
                seen.append(snapshot.period)
        return tuple(seen)

    @property
    def period(self) -> Period:
        """The single period this event touches."""
        periods = self.periods
        if len(periods) != 1:
            raise InvalidInputError(
                "Event spans more than one period; split it first",
                details={"invoice_id": self.invoice_id, "periods": [p.key for p in periods]},
            )
        return periods[0]

    @classmethod
    def created(cls, snapshot: InvoiceSnapshot) -> "InvoiceEvent":
        return cls(EventKind.CREATED, snapshot.invoice_id, current=snapshot)

    @classmethod
    def deleted(cls, snapshot: InvoiceSnapshot) -> "InvoiceEvent":
        return cls(EventKind.DELETED, snapshot.invoice_id, previous=snapshot)

    @classmethod
    def updated(cls, previous: InvoiceSnapshot, current: InvoiceSnapshot) -> "InvoiceEvent":
        return cls(EventKind.UPDATED, current.invoice_id, previous=previous, current=current)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InvoiceEvent":
        """Validate an inbound ``{kind, invoiceId, previous?, current?}`` payload."""

        if not isinstance(data, Mapping):
            raise InvalidInputError("Event payload must be a mapping")
        try:
            kind = EventKind(str(data.get("kind", "")).strip().lower())
        except ValueError as exc:
            raise InvalidInputError(
                f"Unknown event kind: {data.get('kind')!r}", details={"kind": data.get("kind")}
            ) from exc

        invoice_id = data.get("invoice_id", data.get("invoiceId"))
        if invoice_id in (None, ""):
            raise InvalidInputError("Event is missing invoice_id", details={"kind": kind.value})
        invoice_id = str(invoice_id)

        previous = data.get("previous")
        current = data.get("current")
        return cls(
            kind=kind,
            invoice_id=invoice_id,
            previous=InvoiceSnapshot.from_dict(invoice_id, previous) if previous is not None else None,
            current=InvoiceSnapshot.from_dict(invoice_id, current) if current is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"kind": self.kind.value, "invoice_id": self.invoice_id}
        if self.previous is not None:
            payload["previous"] = self.previous.to_dict()
        if self.current is not None:
            payload["current"] = self.current.to_dict()
        return payload
