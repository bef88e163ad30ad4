"""Command line entry point for RevLedger."""

from __future__ import annotations

import json
from pathlib import Path

import click

from .config import BaseConfig
from .domain.invoices import InvoiceEvent, InvoiceSnapshot
from .errors import InvalidInputError, RevLedgerError
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelRevenueRepository
from .logging_config import setup_logging
from .services.export_csv import export_rolling_year_csv
from .services.revenue_events import RevenueEventOrchestrator, apply_event
from .services.rolling_year import RollingYearService
from .services.seeding import reseed


class AppContext:
    """Lazily bootstrapped config, logging and repository shared by commands."""

    def __init__(self) -> None:
        self._repository: SQLModelRevenueRepository | None = None
        self.config: BaseConfig | None = None

    @property
    def repository(self) -> SQLModelRevenueRepository:
        if self._repository is None:
            try:
                self.config = BaseConfig()
            except ValueError as exc:
                raise click.ClickException(str(exc)) from exc
            setup_logging(self.config)
            _engine, session_factory = bootstrap_database(self.config)
            self._repository = SQLModelRevenueRepository(session_factory)
        return self._repository


pass_app = click.make_pass_decorator(AppContext, ensure=True)


def _fail(exc: RevLedgerError, where: str | None = None) -> click.ClickException:
    prefix = f"{where}: " if where else ""
    return click.ClickException(f"{prefix}[{exc.code}] {exc.message}")


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """Incremental monthly revenue aggregates."""
    ctx.ensure_object(AppContext)


@main.command("init-db")
@pass_app
def init_db(app: AppContext) -> None:
    """Create the database schema."""

    _ = app.repository
    config = app.config
    click.echo(f"{config.APP_NAME} database ready: {config.DATABASE_URL}")  # type: ignore[union-attr]


@main.command("apply-events")
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print executed write intents as JSON lines")
@pass_app
def apply_events(app: AppContext, events_file: Path, as_json: bool) -> None:
    """Apply invoice events from a JSON-lines file, in file order."""

    repository = app.repository
    orchestrator = RevenueEventOrchestrator()
    applied = 0
    writes = 0
    with events_file.open(encoding="utf-8") as fh:
        for line_no, line in enumerate(fh, start=1):
            if not line.strip():
                continue
            where = f"{events_file.name}:{line_no}"
            try:
                event = InvoiceEvent.from_dict(json.loads(line))
                intents = apply_event(repository, event, orchestrator)
            except json.JSONDecodeError as exc:
                raise click.ClickException(f"{where}: invalid JSON ({exc.msg})") from exc
            except RevLedgerError as exc:
                raise _fail(exc, where) from exc
            applied += 1
            writes += len(intents)
            if as_json:
                for intent in intents:
                    click.echo(json.dumps({"invoice_id": event.invoice_id, **intent.to_dict()}))

    if not as_json:
        click.echo(f"Applied {applied} events ({writes} aggregate writes)")


@main.command("seed")
@click.argument("invoices_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@pass_app
def seed(app: AppContext, invoices_file: Path) -> None:
    """Rebuild every aggregate from a JSON list of invoices."""

    try:
        raw = json.loads(invoices_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{invoices_file.name}: invalid JSON ({exc.msg})") from exc
    if not isinstance(raw, list):
        raise click.ClickException(f"{invoices_file.name}: expected a JSON list of invoices")

    try:
        invoices = []
        for item in raw:
            if not isinstance(item, dict):
                raise InvalidInputError("Invoice entry must be an object")
            invoice_id = item.get("invoice_id", item.get("invoiceId"))
            if invoice_id in (None, ""):
                raise InvalidInputError("Invoice entry is missing invoice_id")
            invoices.append(InvoiceSnapshot.from_dict(str(invoice_id), item))
        seeded = reseed(app.repository, invoices)
    except RevLedgerError as exc:
        raise _fail(exc, invoices_file.name) from exc

    click.echo(f"Seeded {len(seeded)} periods from {len(invoices)} invoices")


@main.command("rolling-year")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full report as JSON")
@pass_app
def rolling_year(app: AppContext, as_json: bool) -> None:
    """Show the last twelve months of revenue, oldest first."""

    report = RollingYearService(app.repository).build_report()
    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    for month in report["months"]:
        click.echo(
            f"{month['month']} {month['year']}  "
            f"total={month['total_amount']:>10}  "
            f"paid={month['total_paid_amount']:>10}  "
            f"pending={month['total_pending_amount']:>10}  "
            f"invoices={month['invoice_count']}"
        )


@main.command("statistics")
@pass_app
def statistics(app: AppContext) -> None:
    """Show total, average, min and max over the rolling year."""

    stats = RollingYearService(app.repository).calculate_statistics()
    for name, value in stats.to_dict().items():
        click.echo(f"{name}: {value}")


@main.command("export-csv")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@pass_app
def export_csv(app: AppContext, output: Path) -> None:
    """Write the rolling-year series to a CSV file."""

    entries = RollingYearService(app.repository).calculate_for_rolling_year()
    path = export_rolling_year_csv(entries=entries, output_path=output)
    click.echo(f"Export written: {path}")


if __name__ == "__main__":
    main()
