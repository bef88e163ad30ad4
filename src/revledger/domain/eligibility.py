"""Which invoice statuses count toward revenue."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    DRAFT = "draft"
    VOID = "void"


ELIGIBLE_STATUSES = frozenset({InvoiceStatus.PAID, InvoiceStatus.PENDING})

StatusLike = Union[InvoiceStatus, str]


def coerce_status(status: StatusLike) -> Optional[InvoiceStatus]:
    """Return the enum member for ``status`` or None when it is unknown."""
    if isinstance(status, InvoiceStatus):
        return status
    try:
        return InvoiceStatus(str(status).strip().lower())
    except ValueError:
        return None


def is_eligible(status: Optional[StatusLike]) -> bool:
    if status is None:
        return False
    return coerce_status(status) in ELIGIBLE_STATUSES


@dataclass(frozen=True)
class Eligibility:
    was_eligible: bool
    is_eligible: bool


def classify_eligibility(
    previous_status: Optional[StatusLike], current_status: Optional[StatusLike]
) -> Eligibility:
    """Eligibility before and after a change; a missing state is ineligible."""
    return Eligibility(
        was_eligible=is_eligible(previous_status),
        is_eligible=is_eligible(current_status),
    )
