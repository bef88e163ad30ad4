"""Exception hierarchy for the revenue engine."""

from __future__ import annotations

from typing import Any


class RevLedgerError(Exception):
    """Base exception for all engine errors.

    Subclasses set ``code`` at the class level; callers provide ``message`` and
    optional structured ``details`` for logging.
    """

    code: str = "REVLEDGER_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": dict(self.details)}


class InvalidInputError(RevLedgerError):
    """Malformed period/date or invoice payload; nothing was applied."""

    code = "INVALID_INPUT"


class AggregateInvariantError(RevLedgerError):
    """An event presupposes a stored aggregate that does not exist.

    Signals wrong upstream event ordering; never retried internally.
    """

    code = "INVARIANT_VIOLATION"
