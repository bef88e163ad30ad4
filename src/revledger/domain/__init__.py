"""Pure revenue-engine domain: periods, eligibility, calculators, templates."""

from .eligibility import ELIGIBLE_STATUSES, InvoiceStatus, classify_eligibility, is_eligible
from .intents import AggregateFields, DeleteAggregate, UpsertAggregate, WriteIntent
from .invoices import EventKind, InvoiceEvent, InvoiceSnapshot
from .period import Period, require_period, resolve_period
from .result import Result
from .templates import (
    RevenueDisplayEntity,
    RollingMonth,
    TemplateAndPeriods,
    build_defaults_from_fresh_template,
    build_template_and_periods,
    merge_with_template,
)
from .transitions import TransitionKind, apply_transition, classify_transition

__all__ = [
    "AggregateFields",
    "DeleteAggregate",
    "ELIGIBLE_STATUSES",
    "EventKind",
    "InvoiceEvent",
    "InvoiceSnapshot",
    "InvoiceStatus",
    "Period",
    "Result",
    "RevenueDisplayEntity",
    "RollingMonth",
    "TemplateAndPeriods",
    "TransitionKind",
    "UpsertAggregate",
    "WriteIntent",
    "apply_transition",
    "build_defaults_from_fresh_template",
    "build_template_and_periods",
    "classify_eligibility",
    "classify_transition",
    "is_eligible",
    "merge_with_template",
    "require_period",
    "resolve_period",
]
