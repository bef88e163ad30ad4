"""Calendar-month periods and resolution of invoice dates to periods."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Union

from ..errors import InvalidInputError
from .result import Result

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")

PeriodInput = Union["Period", date, datetime, str]


@dataclass(frozen=True, order=True)
class Period:
    """A calendar month, identified by its first day (UTC)."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise InvalidInputError(
                f"Month must be between 1 and 12, got {self.month}",
                details={"year": self.year, "month": self.month},
            )
        if not 1 <= self.year <= 9999:
            raise InvalidInputError(
                f"Year out of range: {self.year}",
                details={"year": self.year, "month": self.month},
            )

    @classmethod
    def from_date(cls, value: date | datetime) -> "Period":
        if isinstance(value, datetime) and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return cls(value.year, value.month)

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def isoformat(self) -> str:
        return self.start.isoformat()

    def shift(self, months: int) -> "Period":
        """Return the period ``months`` calendar months away (negative for past)."""
        index = self.year * 12 + (self.month - 1) + months
        return Period(index // 12, index % 12 + 1)

    def __str__(self) -> str:
        return self.key


def resolve_period(value: object) -> Result[Period]:
    """Map an invoice date to the period of its calendar month.

    Accepts ``Period``, ``date``/``datetime`` objects, ISO full dates (with an
    optional time part) and ISO year-month strings. Anything else is a failed
    result carrying an ``InvalidInputError``.
    """

    if isinstance(value, Period):
        return Result.success(value)
    if isinstance(value, (date, datetime)):
        return Result.success(Period.from_date(value))
    if not isinstance(value, str):
        return Result.failure(
            InvalidInputError(
                "Period must be a date or an ISO date string",
                details={"value": repr(value)},
            )
        )

    raw = value.strip()
    match = _YEAR_MONTH_RE.match(raw)
    try:
        if match:
            return Result.success(Period(int(match.group(1)), int(match.group(2))))
        if len(raw) == 10:
            return Result.success(Period.from_date(date.fromisoformat(raw)))
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except (InvalidInputError, ValueError):
        return Result.failure(
            InvalidInputError(
                f"Not a valid calendar date: {value!r}", details={"value": value}
            )
        )
    return Result.success(Period.from_date(parsed))


def require_period(value: object) -> Period:
    """Raising variant of :func:`resolve_period`."""
    return resolve_period(value).unwrap()
